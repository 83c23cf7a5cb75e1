"""Health router."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request

from mcplink.api.models import HealthCheck, HealthStatus

health_router = APIRouter(tags=["Health"])


@health_router.get("/health", response_model=HealthCheck)
async def health_check(request: Request) -> HealthCheck:
    """Report manager health and how many known servers are connected.

    Degraded when any known server reports an error.
    """
    manager = request.app.state.manager
    checks: dict[str, str] = {}

    try:
        statuses = manager.all_statuses()
        checks["manager"] = "ok"
    except Exception as e:
        statuses = {}
        checks["manager"] = f"error: {e}"

    for server_id, status in statuses.items():
        if status.error:
            checks[f"server:{server_id}"] = f"error: {status.error}"

    connected = sum(1 for status in statuses.values() if status.connected)

    if checks["manager"] != "ok":
        health = HealthStatus.UNHEALTHY
    elif len(checks) > 1:
        health = HealthStatus.DEGRADED
    else:
        health = HealthStatus.HEALTHY

    return HealthCheck(
        status=health,
        checks=checks,
        connected=connected,
        total=len(statuses),
        timestamp=datetime.now(UTC),
    )

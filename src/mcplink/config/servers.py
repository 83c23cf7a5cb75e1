"""Server definition import/export.

Definitions travel as a JSON array in the configuration store's shape
(camelCase ``createdAt``/``updatedAt`` in epoch milliseconds).
"""

import json
import random
import string
import time
from typing import Any

from mcplink.errors import create_error
from mcplink.mcp.types import ServerConfig

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_server_id() -> str:
    """New server id of the form ``mcp-<epoch ms>-<9 random chars>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"mcp-{_now_ms()}-{suffix}"


def import_servers(payload: str | list[Any], existing: list[ServerConfig] | None = None) -> list[ServerConfig]:
    """Merge imported definitions into ``existing``.

    Entries without an id get a generated one. ``createdAt`` is kept when
    present, ``updatedAt`` is always stamped with the import time. An imported
    entry replaces an existing one with the same id in place; new ids are
    appended in import order.

    Args:
        payload: JSON text or an already parsed list
        existing: Current definitions (not modified)

    Returns:
        The merged list

    Raises:
        ConfigurationError: If the payload is not a JSON array or an entry is invalid
    """
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise create_error("CONFIG_INVALID", detail=f"Invalid JSON: {e}") from e

    if not isinstance(payload, list):
        raise create_error("CONFIG_INVALID", detail="Invalid format: expected array")

    now = _now_ms()
    imported: list[ServerConfig] = []
    for entry in payload:
        if not isinstance(entry, dict):
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Invalid format: expected object entries, got {type(entry).__name__}",
            )
        data = dict(entry)
        data["id"] = data.get("id") or generate_server_id()
        data["createdAt"] = data.get("createdAt") or data.get("created_at") or now
        data["updatedAt"] = now
        data.pop("created_at", None)
        data.pop("updated_at", None)
        imported.append(ServerConfig.from_dict(data))

    merged = list(existing or [])
    index = {server.id: i for i, server in enumerate(merged)}
    for server in imported:
        if server.id in index:
            merged[index[server.id]] = server
        else:
            index[server.id] = len(merged)
            merged.append(server)
    return merged


def export_servers(servers: list[ServerConfig]) -> str:
    """Serialize definitions as indented JSON, ready for ``import_servers``."""
    return json.dumps([server.to_dict() for server in servers], indent=2)


def _now_ms() -> int:
    return int(time.time() * 1000)

"""Session cache - last known status and config per server id.

Process-lifetime and in-memory only. Nothing is written to disk, so a
restart of the process starts with an empty cache.
"""

from .types import ConnectionStatus, ServerConfig, SessionRecord


class SessionCache:
    """Shadow of each server's last known connection status."""

    def __init__(self) -> None:
        self._records: dict[str, SessionRecord] = {}

    def save(self, server_id: str, status: ConnectionStatus, config: ServerConfig) -> SessionRecord:
        """Record the status and config for a server, replacing any previous record."""
        record = SessionRecord(server_id=server_id, status=status, config=config)
        self._records[server_id] = record
        return record

    def load(self, server_id: str) -> SessionRecord | None:
        """Get the record for a server, if any."""
        return self._records.get(server_id)

    def load_all(self) -> list[SessionRecord]:
        """Snapshot of every record."""
        return list(self._records.values())

    def delete(self, server_id: str) -> bool:
        """Forget a server. Returns True if a record existed."""
        return self._records.pop(server_id, None) is not None

    def clear(self) -> None:
        self._records.clear()

    def __contains__(self, server_id: object) -> bool:
        return server_id in self._records

    def __len__(self) -> int:
        return len(self._records)

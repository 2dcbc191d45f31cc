"""Maps server records back onto client identifiers."""

import logging
from typing import Any, Optional

__all__ = ["IdentityReconciler"]

logger = logging.getLogger(__name__)


class IdentityReconciler:
    """Translates between the client id space and the server id space.

    The server is the source of truth for a record's content, the client
    identifier (echoed back under ``clientId``) for its identity. Records
    created server-side without a client identifier fall back to the
    server's own id, stringified.
    """

    def __init__(self, client_field: str = "clientId", server_field: str = "id"):
        self.client_field = client_field
        self.server_field = server_field

    def client_id(self, record: dict) -> Optional[str]:
        """Return the identifier the app uses for a server record."""
        client_id = record.get(self.client_field)
        if client_id:
            return str(client_id)
        server_id = record.get(self.server_field)
        if server_id is not None:
            return str(server_id)
        return None

    def server_id(self, record: dict) -> Optional[Any]:
        return record.get(self.server_field)

    def reconcile(self, record: dict) -> dict:
        """Return a copy of record with ``id`` replaced by the client id."""
        reconciled = dict(record)
        client_id = self.client_id(record)
        if client_id is None:
            raise ValueError("Server record carries neither a client nor a server id")
        reconciled["id"] = client_id
        return reconciled

    def id_map(self, records: list[dict]) -> dict[str, Any]:
        """Build app id -> server id for every record carrying a server id.

        Records without a client identifier map their stringified server id
        onto itself, so server-side deletes still resolve after a fetch.
        """
        mapping: dict[str, Any] = {}
        for record in records:
            server_id = record.get(self.server_field)
            if server_id is not None:
                mapping[self.client_id(record)] = server_id
        return mapping

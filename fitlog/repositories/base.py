"""Local-first repository protocol shared by every entity type.

Reads prefer the server and refresh the local mirror, falling back to the
mirror on any failure. Writes land in the local store first and are then
pushed upstream when a session is present. Neither path raises.
"""

import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar
from urllib.parse import quote

from ..auth.session import AuthGate
from ..sync.http_client import RemoteClient, RemoteError
from ..sync.local_store import LocalStore, StorageError
from ..sync.reconcile import IdentityReconciler
from ..sync.writer import PushResult, RetryingWriter

__all__ = ["EntityRepository", "SingletonRepository", "SyncOutcome", "new_client_id"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Anything that can go wrong turning stored or fetched JSON into entities.
DECODE_ERRORS = (ValueError, KeyError, TypeError, AttributeError)


def new_client_id() -> str:
    return str(uuid.uuid4())


@dataclass
class SyncOutcome:
    """What happened to a write.

    ``persisted`` is the local write; ``pushed`` the server copy. A write
    with ``pushed=False`` and no error was local-only by design (no session,
    or an entity that never syncs).
    """

    persisted: bool = True
    pushed: bool = False
    queued: bool = False
    error: Optional[str] = None

    @classmethod
    def from_push(cls, persisted: bool, result: PushResult, error: Optional[str] = None) -> "SyncOutcome":
        return cls(
            persisted=persisted,
            pushed=result.success,
            queued=result.queued,
            error=error or result.error,
        )


class _StoreBacked:
    """JSON helpers over the LocalStore that never raise on read."""

    def __init__(
        self,
        store: LocalStore,
        auth: AuthGate,
        client: Optional[RemoteClient] = None,
        writer: Optional[RetryingWriter] = None,
    ):
        self.store = store
        self.auth = auth
        self.client = client if client is not None else getattr(writer, "client", None)
        if writer is None and self.client is not None:
            writer = RetryingWriter(self.client)
        self.writer = writer

    async def _read_json(self, key: str) -> Any:
        """Stored JSON under key, or None if absent or unreadable."""
        try:
            raw = await self.store.get(key)
        except StorageError as e:
            logger.error(f"Failed to read {key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.error(f"Corrupt data under {key}: {e}")
            return None

    async def _write_json(self, key: str, value: Any) -> None:
        """Persist value under key. Raises StorageError."""
        try:
            raw = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Cannot serialize {key}: {e}") from e
        await self.store.set(key, raw)

    def _can_sync(self, path: Optional[str]) -> bool:
        return bool(path) and self.client is not None and self.auth.is_authenticated()


class EntityRepository(_StoreBacked, Generic[T]):
    """get-all / get / save / delete for one collection.

    Subclasses set the storage key, the entity class and the server
    endpoints. An entity without ``endpoint`` is kept on the device only.
    """

    key: str = ""
    entity_cls: Any = None
    endpoint: Optional[str] = None
    delete_endpoint: Optional[str] = None  # e.g. "/api/routines/{id}"

    def __init__(
        self,
        store: LocalStore,
        auth: AuthGate,
        client: Optional[RemoteClient] = None,
        writer: Optional[RetryingWriter] = None,
        reconciler: Optional[IdentityReconciler] = None,
    ):
        super().__init__(store, auth, client=client, writer=writer)
        self.reconciler = reconciler or IdentityReconciler()

    @property
    def id_map_key(self) -> str:
        return f"{self.key}:server_ids"

    @property
    def storage_keys(self) -> list[str]:
        """Every local key this repository owns."""
        if self.endpoint:
            return [self.key, self.id_map_key]
        return [self.key]

    # Mapping

    def to_local(self, entity: T) -> dict:
        return entity.to_dict()

    def from_local(self, data: dict) -> T:
        return self.entity_cls.from_dict(data)

    def to_wire(self, entity: T) -> dict:
        return entity.to_wire()

    def from_wire(self, record: dict) -> T:
        return self.entity_cls.from_wire(self.reconciler.reconcile(record))

    # Local mirror

    async def load_local(self) -> list[T]:
        """The local collection; empty on any read or decode failure."""
        data = await self._read_json(self.key)
        if data is None:
            return []
        try:
            return [self.from_local(item) for item in data]
        except DECODE_ERRORS as e:
            logger.error(f"Discarding undecodable {self.key}: {e}")
            return []

    async def _persist(self, items: list[T]) -> None:
        await self._write_json(self.key, [self.to_local(item) for item in items])

    async def server_ids(self) -> dict[str, Any]:
        """Client id -> server id, as last seen from the server."""
        data = await self._read_json(self.id_map_key)
        return data if isinstance(data, dict) else {}

    async def _remember_server_ids(self, mapping: dict[str, Any], replace: bool = False) -> None:
        if not mapping and not replace:
            return
        async with self.store.lock(self.id_map_key):
            current = {} if replace else await self.server_ids()
            current.update(mapping)
            try:
                await self._write_json(self.id_map_key, current)
            except StorageError as e:
                logger.error(f"Failed to store id map for {self.key}: {e}")

    # Read path

    async def _fetch_remote(self, params: Optional[dict] = None) -> tuple[list[T], dict[str, Any]]:
        records = await self.client.request("GET", self.endpoint, params=params)
        if not isinstance(records, list):
            raise TypeError(f"Expected a list from {self.endpoint}, got {type(records).__name__}")
        entities = [self.from_wire(record) for record in records]
        return entities, self.reconciler.id_map(records)

    def _order(self, items: list[T]) -> list[T]:
        return items

    async def get_all(self) -> list[T]:
        """Server collection when reachable, otherwise the local mirror."""
        if self._can_sync(self.endpoint):
            try:
                entities, mapping = await self._fetch_remote()
            except RemoteError as e:
                logger.info(f"Using local {self.key}: {e}")
            except DECODE_ERRORS as e:
                logger.warning(f"Malformed {self.endpoint} response, using local data: {e}")
            else:
                async with self.store.lock(self.key):
                    try:
                        await self._persist(entities)
                    except StorageError as e:
                        logger.error(f"Failed to refresh local {self.key}: {e}")
                await self._remember_server_ids(mapping, replace=True)
                return entities

        return self._order(await self.load_local())

    async def get(self, entity_id: str) -> Optional[T]:
        for entity in await self.get_all():
            if entity.id == entity_id:
                return entity
        return None

    # Write path

    async def save(self, entity: T) -> SyncOutcome:
        """Upsert locally, then push when signed in.

        A missing ``id`` gets a new client identifier, written back onto
        the entity.
        """
        if not entity.id:
            entity.id = new_client_id()

        persisted, error = await self._upsert_local(entity)

        if not self._can_sync(self.endpoint):
            return SyncOutcome(persisted=persisted, error=error)

        result = await self.writer.push(self.endpoint, "POST", self.to_wire(entity))
        if result.success:
            await self._remember_push(entity, result.data)
        return SyncOutcome.from_push(persisted, result, error)

    async def _upsert_local(self, entity: T) -> tuple[bool, Optional[str]]:
        async with self.store.lock(self.key):
            items = await self.load_local()
            for index, existing in enumerate(items):
                if existing.id == entity.id:
                    items[index] = entity
                    break
            else:
                items.append(entity)
            try:
                await self._persist(items)
            except StorageError as e:
                logger.error(f"Failed to save {self.key} {entity.id}: {e}")
                return False, str(e)
        return True, None

    async def _remember_push(self, entity: T, data: Any) -> None:
        server_id = self.reconciler.server_id(data) if isinstance(data, dict) else None
        if server_id is not None:
            await self._remember_server_ids({entity.id: server_id})

    # Delete path

    async def _remote_delete_path(self, entity_id: str) -> Optional[str]:
        if not self.delete_endpoint:
            return None
        return self.delete_endpoint.format(id=quote(entity_id, safe=""))

    async def delete(self, entity_id: str) -> SyncOutcome:
        """Remove locally at once; best-effort single DELETE upstream."""
        async with self.store.lock(self.key):
            items = await self.load_local()
            remaining = [item for item in items if item.id != entity_id]
            persisted, error = True, None
            if len(remaining) != len(items):
                try:
                    await self._persist(remaining)
                except StorageError as e:
                    logger.error(f"Failed to delete {self.key} {entity_id}: {e}")
                    persisted, error = False, str(e)

        if not self._can_sync(self.delete_endpoint):
            return SyncOutcome(persisted=persisted, error=error)

        path = await self._remote_delete_path(entity_id)
        if path is None:
            logger.debug(f"No server id known for {self.key} {entity_id}; local delete only")
            return SyncOutcome(persisted=persisted, error=error)

        result = await self.writer.push(path, "DELETE", retry=False, queue_on_failure=False)
        return SyncOutcome.from_push(persisted, result, error)


class SingletonRepository(_StoreBacked, Generic[T]):
    """A single JSON object (profile, macro targets) rather than a list."""

    key: str = ""
    entity_cls: Any = None
    endpoint: Optional[str] = None

    @property
    def storage_keys(self) -> list[str]:
        return [self.key]

    async def load_local(self) -> Optional[T]:
        data = await self._read_json(self.key)
        if data is None:
            return None
        try:
            return self.entity_cls.from_dict(data)
        except DECODE_ERRORS as e:
            logger.error(f"Discarding undecodable {self.key}: {e}")
            return None

    async def get(self) -> Optional[T]:
        if self._can_sync(self.endpoint):
            try:
                data = await self.client.request("GET", self.endpoint)
                entity = self.entity_cls.from_dict(data) if data else None
            except RemoteError as e:
                logger.info(f"Using local {self.key}: {e}")
            except DECODE_ERRORS as e:
                logger.warning(f"Malformed {self.endpoint} response, using local data: {e}")
            else:
                if entity is not None:
                    try:
                        await self._write_json(self.key, entity.to_dict())
                    except StorageError as e:
                        logger.error(f"Failed to refresh local {self.key}: {e}")
                    return entity

        return await self.load_local()

    async def save(self, entity: T) -> SyncOutcome:
        persisted, error = True, None
        async with self.store.lock(self.key):
            try:
                await self._write_json(self.key, entity.to_dict())
            except StorageError as e:
                logger.error(f"Failed to save {self.key}: {e}")
                persisted, error = False, str(e)

        if not self._can_sync(self.endpoint):
            return SyncOutcome(persisted=persisted, error=error)

        result = await self.writer.push(self.endpoint, "POST", entity.to_dict())
        return SyncOutcome.from_push(persisted, result, error)

"""Wires the store, transport, session and repositories together."""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Union

from .auth import AuthGate, LoginManager, SessionVault
from .collaborators import RemoteFoodServices
from .config import Config, setup_logging
from .repositories import (
    BodyWeightRepository,
    ExerciseRepository,
    FoodLogRepository,
    MacroTargetsRepository,
    RoutineRepository,
    RunRepository,
    SavedFoodRepository,
    UserProfileRepository,
    WorkoutRepository,
)
from .sync import (
    FlushStats,
    IdentityReconciler,
    LocalStore,
    Outbox,
    OutboxFlusher,
    RemoteClient,
    RetryConfig,
    RetryingWriter,
)

__all__ = ["DataLayer"]

logger = logging.getLogger(__name__)


class DataLayer:
    """The app's single entry point to local-first data.

    Everything is built from a Config; any piece can be passed in instead,
    which is how tests swap in an in-memory store or a stub session.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        store: Optional[LocalStore] = None,
        auth: Optional[AuthGate] = None,
        client: Optional[RemoteClient] = None,
        outbox: Optional[Outbox] = None,
        db_path: Optional[Union[Path, str]] = None,
    ):
        if config is None:
            config = Config.load()
            setup_logging(config.debug_mode)
        self.config = config
        sync = self.config.sync

        self.store = store or LocalStore(db_path)
        self.auth = auth or AuthGate(vault=SessionVault())
        self.client = client or RemoteClient(
            self.config.api_url,
            auth=self.auth,
            timeout=sync.timeout_seconds,
        )

        if outbox is None and sync.outbox_enabled:
            outbox = Outbox()
        self.outbox = outbox

        self.writer = RetryingWriter(
            self.client,
            retry_config=RetryConfig.from_attempts(
                sync.push_attempts, sync.base_delay, sync.max_delay
            ),
            outbox=self.outbox,
            outbox_max_retries=sync.outbox_max_retries,
        )
        self.flusher: Optional[OutboxFlusher] = None
        if self.outbox is not None:
            self.flusher = OutboxFlusher(
                self.writer, self.auth, interval_seconds=sync.outbox_interval_seconds
            )

        reconciler = IdentityReconciler()
        repo_args = (self.store, self.auth)
        repo_kwargs = {"writer": self.writer, "reconciler": reconciler}

        self.routines = RoutineRepository(*repo_args, **repo_kwargs)
        self.workouts = WorkoutRepository(*repo_args, **repo_kwargs)
        self.body_weights = BodyWeightRepository(*repo_args, **repo_kwargs)
        self.food_log = FoodLogRepository(*repo_args, **repo_kwargs)
        self.runs = RunRepository(*repo_args, **repo_kwargs)
        self.exercises = ExerciseRepository(*repo_args, **repo_kwargs)
        self.saved_foods = SavedFoodRepository(*repo_args, **repo_kwargs)
        self.macro_targets = MacroTargetsRepository(*repo_args, writer=self.writer)
        self.profile = UserProfileRepository(*repo_args, writer=self.writer)

        self.food_services = RemoteFoodServices(self.client)
        self.login = LoginManager(self.client, self.auth, clear_local_data=self.clear_all_data)

    @property
    def repositories(self) -> list:
        return [
            self.profile,
            self.macro_targets,
            self.exercises,
            self.routines,
            self.workouts,
            self.body_weights,
            self.saved_foods,
            self.food_log,
            self.runs,
        ]

    @property
    def storage_keys(self) -> list[str]:
        """Every key the data layer writes to the local store."""
        keys: list[str] = []
        for repo in self.repositories:
            keys.extend(repo.storage_keys)
        return keys

    async def clear_all_data(self) -> None:
        """Remove every local collection, identifier map and queued push."""
        await self.store.remove_many(self.storage_keys)
        if self.outbox is not None:
            removed = await asyncio.to_thread(self.outbox.clear)
            if removed:
                logger.info(f"Discarded {removed} queued pushes")
        logger.info("Cleared all local data")

    async def on_foreground(self) -> FlushStats:
        """Replay queued pushes when the app comes back to the foreground."""
        if self.flusher is None:
            return FlushStats()
        return await self.flusher.flush()

    def start(self) -> None:
        """Start periodic outbox replay. Call from inside the event loop."""
        if self.flusher is not None:
            self.flusher.start()

    def shutdown(self) -> None:
        if self.flusher is not None:
            self.flusher.shutdown()
        self.client.close()
        self.store.close()
        if self.outbox is not None:
            self.outbox.close()

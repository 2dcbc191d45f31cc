"""Sync module - local store, transport and push retry."""

from .http_client import (
    DecodeError,
    HttpError,
    NetworkError,
    RemoteClient,
    RemoteError,
    ServerFault,
    ServerRejection,
)
from .local_store import LocalStore, StorageError
from .outbox import Outbox, OutboxItem
from .reconcile import IdentityReconciler
from .retry import RetryConfig, RetryExhausted, retry_with_backoff
from .scheduler import OutboxFlusher
from .writer import FlushStats, PushResult, RetryingWriter

__all__ = [
    "DecodeError",
    "HttpError",
    "NetworkError",
    "RemoteClient",
    "RemoteError",
    "ServerFault",
    "ServerRejection",
    "LocalStore",
    "StorageError",
    "Outbox",
    "OutboxItem",
    "IdentityReconciler",
    "RetryConfig",
    "RetryExhausted",
    "retry_with_backoff",
    "OutboxFlusher",
    "FlushStats",
    "PushResult",
    "RetryingWriter",
]

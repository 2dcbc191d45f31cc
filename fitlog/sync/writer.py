"""Pushes local changes to the server with bounded retry."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

from .http_client import (
    DecodeError,
    HttpError,
    NetworkError,
    RemoteClient,
    RemoteError,
    ServerFault,
)
from .outbox import Outbox
from .retry import RetryConfig, RetryExhausted, retry_with_backoff

__all__ = ["RetryingWriter", "PushResult", "FlushStats"]

logger = logging.getLogger(__name__)

# Transient failures worth another attempt; 4xx and bad JSON are final.
RETRYABLE_ERRORS = (NetworkError, ServerFault)


@dataclass
class PushResult:
    """Result of pushing one change upstream."""

    success: bool
    data: Any = None
    error: Optional[str] = None
    status: Optional[int] = None
    attempts: int = 0
    queued: bool = False


@dataclass
class FlushStats:
    """Statistics from one outbox replay."""

    delivered: int = 0
    failed: int = 0
    dropped: int = 0


class RetryingWriter:
    """Wraps RemoteClient writes with a bounded retry policy.

    Never raises: every outcome is reported through PushResult.
    """

    DEFAULT_RETRY_CONFIG = RetryConfig(
        max_retries=2,
        base_delay=1.0,
        max_delay=10.0,
        exponential_base=2.0,
        jitter=True,
    )

    def __init__(
        self,
        client: RemoteClient,
        retry_config: Optional[RetryConfig] = None,
        outbox: Optional[Outbox] = None,
        outbox_max_retries: int = 10,
    ):
        """Initialize the writer.

        Args:
            client: Transport used for every request
            retry_config: Backoff policy for transient failures
            outbox: Optional durable queue for pushes that exhaust their retries
            outbox_max_retries: Replays before an outbox item is dropped
        """
        self.client = client
        self.retry_config = retry_config or self.DEFAULT_RETRY_CONFIG
        self.outbox = outbox
        self.outbox_max_retries = outbox_max_retries

    async def push(
        self,
        path: str,
        method: str,
        body: Any = None,
        retry: bool = True,
        queue_on_failure: bool = True,
    ) -> PushResult:
        """Send one change to the server.

        Args:
            path: API path
            method: HTTP verb
            body: JSON body
            retry: Retry transient failures with backoff
            queue_on_failure: Append to the outbox (if any) when retries run out

        Returns:
            PushResult describing the outcome
        """
        attempts = 0

        async def attempt() -> Any:
            nonlocal attempts
            attempts += 1
            return await self.client.request(method, path, data=body)

        config = self.retry_config if retry else RetryConfig(max_retries=0)
        try:
            data = await retry_with_backoff(
                attempt,
                config=config,
                retryable_exceptions=RETRYABLE_ERRORS,
            )
            return PushResult(success=True, data=data, attempts=attempts)
        except RetryExhausted as e:
            error = e.last_error
            logger.warning(f"Push {method} {path} failed after {attempts} attempts: {error}")
            queued = False
            if queue_on_failure and self.outbox is not None:
                queued = await self._enqueue(path, method, body)
            return PushResult(
                success=False,
                error=str(error),
                status=getattr(error, "status", None),
                attempts=attempts,
                queued=queued,
            )
        except (HttpError, DecodeError) as e:
            logger.warning(f"Push {method} {path} rejected: {e}")
            return PushResult(
                success=False,
                error=str(e),
                status=getattr(e, "status", None),
                attempts=attempts,
            )
        except RemoteError as e:
            logger.warning(f"Push {method} {path} failed: {e}")
            return PushResult(success=False, error=str(e), attempts=attempts)

    async def _enqueue(self, path: str, method: str, body: Any) -> bool:
        try:
            await asyncio.to_thread(self.outbox.enqueue, path, method, body)
            logger.info(f"Queued {method} {path} for later replay")
            return True
        except Exception as e:
            logger.error(f"Failed to queue {method} {path}: {e}")
            return False

    async def flush_outbox(self, batch_size: int = 50) -> FlushStats:
        """Replay queued pushes once each, oldest first.

        Delivered items and permanent rejections are removed; transient
        failures stay queued until they reach outbox_max_retries.
        """
        stats = FlushStats()
        if self.outbox is None:
            return stats

        items = await asyncio.to_thread(self.outbox.peek, batch_size)
        if not items:
            return stats

        done: list[int] = []
        failed: list[int] = []
        for item in items:
            result = await self.push(
                item.path,
                item.method,
                item.body,
                retry=False,
                queue_on_failure=False,
            )
            if result.success:
                done.append(item.id)
                stats.delivered += 1
            elif result.status is not None and 400 <= result.status < 500:
                done.append(item.id)
                stats.dropped += 1
            else:
                failed.append(item.id)
                stats.failed += 1

        await asyncio.to_thread(self.outbox.remove, done)
        await asyncio.to_thread(self.outbox.increment_retry, failed)
        stats.dropped += await asyncio.to_thread(
            self.outbox.remove_failed, self.outbox_max_retries
        )
        logger.info(
            f"Outbox replay: {stats.delivered} delivered, "
            f"{stats.failed} failed, {stats.dropped} dropped"
        )
        return stats

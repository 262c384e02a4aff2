"""
Concurrency Infrastructure.

Shared thread pool for the blocking file reads behind attachment loading.
The pool is created lazily on first access and cleaned up on shutdown.
Sizing is configured in config/settings/concurrency.yaml.

Usage:
    from spaced_notes.core.concurrency import get_io_pool

    # Run blocking code in thread pool (preserves structlog context)
    loop = asyncio.get_running_loop()
    data = await loop.run_in_executor(get_io_pool(), path.read_bytes)
"""

import asyncio
import contextvars
from concurrent.futures import ThreadPoolExecutor

from spaced_notes.core.logging import get_logger

logger = get_logger(__name__)

_io_pool: ThreadPoolExecutor | None = None


class TracedThreadPoolExecutor(ThreadPoolExecutor):
    """ThreadPoolExecutor that propagates contextvars to worker threads.

    Standard ThreadPoolExecutor does not carry structlog context into
    worker threads. This subclass copies the current context before
    dispatching, so bound log fields are preserved.
    """

    def submit(self, fn, /, *args, **kwargs):
        ctx = contextvars.copy_context()
        return super().submit(ctx.run, fn, *args, **kwargs)


def get_io_pool() -> TracedThreadPoolExecutor:
    """Get the shared thread pool for blocking I/O operations.

    Creates the pool lazily on first call using config from concurrency.yaml.
    """
    global _io_pool
    if _io_pool is None:
        from spaced_notes.core.config import get_app_config
        max_workers = get_app_config().concurrency.thread_pool.max_workers
        _io_pool = TracedThreadPoolExecutor(max_workers=max_workers)
        logger.info("Thread pool created", extra={"max_workers": max_workers})
    return _io_pool


async def shutdown_pools() -> None:
    """Shut down the I/O pool. Pool shutdown blocks, so it runs in a thread."""
    global _io_pool

    if _io_pool is not None:
        await asyncio.to_thread(_io_pool.shutdown, wait=True)
        logger.info("Thread pool shut down")
        _io_pool = None

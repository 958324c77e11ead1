"""ContextVar-based log enrichment for request handling.

Every record passing through a handler with `ContextFilter` gets a
``[op:request_id]`` prefix. Operation code ``req`` marks a widget request;
token resolution tasks inherit the context of the request that started them.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar

ctx_operation: ContextVar[str | None] = ContextVar("ctx_operation", default=None)
ctx_request_id: ContextVar[str | None] = ContextVar("ctx_request_id", default=None)


class ContextFilter(logging.Filter):
    """Inject ContextVar values into every LogRecord as ``record.ctx``."""

    def filter(self, record: logging.LogRecord) -> bool:
        parts = [p for p in (ctx_operation.get(None), ctx_request_id.get(None)) if p]
        record.ctx = f"[{':'.join(parts)}] " if parts else ""
        return True


def set_log_context(*, operation: str | None = None, request_id: str | None = None) -> None:
    """Set logging context for the current asyncio task.

    Tasks created afterwards with ``asyncio.create_task()`` inherit a copy.
    """
    if operation is not None:
        ctx_operation.set(operation)
    if request_id is not None:
        ctx_request_id.set(request_id)

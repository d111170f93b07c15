"""Shared utilities."""

from .logging_utils import (
    QueueLogHandler,
    attach_queue_handler,
    configure_logging,
    detach_queue_handler,
)

__all__ = [
    "QueueLogHandler",
    "attach_queue_handler",
    "configure_logging",
    "detach_queue_handler",
]

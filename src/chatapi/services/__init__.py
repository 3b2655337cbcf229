# Re-export primary service layer entry points for convenience.
from .thread import (
    ThreadNotFoundError,
    create_thread,
    delete_thread,
    get_thread_or_404,
    list_threads,
    rename_thread,
)
from .message import (
    create_message,
    list_messages,
)

__all__ = [
    # thread
    "ThreadNotFoundError",
    "create_thread",
    "delete_thread",
    "get_thread_or_404",
    "list_threads",
    "rename_thread",
    # message
    "create_message",
    "list_messages",
]

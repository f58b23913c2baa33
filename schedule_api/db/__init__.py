"""Database access for events and responses.

Controllers import this package as ``db`` and call the repository functions
re-exported here.
"""

from schedule_api.db.core import close_pool, get_pool_stats, init_pool, ping
from schedule_api.db.events import add_response, create_event, get_event, get_responses

__all__ = [
    "add_response",
    "close_pool",
    "create_event",
    "get_event",
    "get_pool_stats",
    "get_responses",
    "init_pool",
    "ping",
]

"""
serialdb

Asynchronous façade over SQLite: every statement runs on one dedicated worker
thread and callers get concurrent.futures.Future results back.
"""

from .config import Settings, get_settings
from .db import Client
from .errors import ClientClosedError, ConnectionError, ExecutionError, SerialDBError
from .results import Result, Row, Value

__all__ = [
    "Client",
    "Result",
    "Row",
    "Value",
    "Settings",
    "get_settings",
    "SerialDBError",
    "ConnectionError",
    "ExecutionError",
    "ClientClosedError",
]

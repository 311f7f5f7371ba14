"""
Solid Steel Core
================

Configuration, logging, storage clients and the JSON content store shared by
all modules.
"""

from .config import Config, get_config_value
from .json_store import JSONStore, StoreError
from .logging_service import LoggingService, db_log

__all__ = ['Config', 'get_config_value', 'JSONStore', 'StoreError', 'LoggingService', 'db_log']

"""
Protocol definitions and global configuration.

ABC contracts that decouple the view pipeline from any particular event
loop, plus the application-wide configuration hooks.
"""

from .scheduler import (
    Scheduler,
    ScheduledCall,
    register_default_scheduler,
    get_default_scheduler,
)
from .listview_config import ListViewConfig, set_listview_config, get_listview_config

__all__ = [
    "Scheduler",
    "ScheduledCall",
    "register_default_scheduler",
    "get_default_scheduler",
    "ListViewConfig",
    "set_listview_config",
    "get_listview_config",
]

"""Base configuration class for list views.

Provides application-wide defaults that individual view configurations
fall back to when they leave a field unset.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ListViewConfig:
    """Application-wide defaults for list views.

    Applications can subclass this to provide custom configuration.

    Attributes:
        default_debounce_ms: Quiet period before a typed search term is committed
        default_window_size: Number of records shown before "load more"
        slow_stage_threshold_ms: Pipeline stages slower than this are logged
        performance_logger_name: Logger receiving pipeline timings
        performance_log_filename: File name for timings when log_dir is set
        log_dir: Directory for the performance log file (no file when None)
    """

    default_debounce_ms: int = 500
    default_window_size: int = 50
    slow_stage_threshold_ms: float = 0.0
    performance_logger_name: str = "pyqt_listview.performance"
    performance_log_filename: str = "performance.log"
    log_dir: Optional[str] = None


# Global config instance (set by application)
_listview_config: Optional[ListViewConfig] = None


def set_listview_config(config: Optional[ListViewConfig]) -> None:
    """Set the global list view configuration.

    Args:
        config: ListViewConfig instance, or None to restore defaults
    """
    global _listview_config
    _listview_config = config


def get_listview_config() -> ListViewConfig:
    """Get the current list view configuration.

    Returns:
        Current ListViewConfig or default if not set
    """
    if _listview_config is None:
        return ListViewConfig()
    return _listview_config

from .core.logging import JsonFormatter, setup_logging
from .settings import AppSettings, get_settings

__all__ = ["AppSettings", "get_settings", "JsonFormatter", "setup_logging"]

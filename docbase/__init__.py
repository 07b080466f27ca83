"""docbase - Audit-stamped base model for MongoDB backed services."""

from docbase.config import DocbaseSettings, get_settings

__version__ = "0.1.0"
__all__ = ["DocbaseSettings", "get_settings"]

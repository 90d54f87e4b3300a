"""
apps.config_entries.services package.
"""
from .decoder import decode_config_entry  # noqa: F401

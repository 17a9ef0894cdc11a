# skillradar/common - shared, Kivy-independent helpers
#
# Used by both core/ and gui/. Nothing here holds runtime state.

from skillradar.common.config_store import JsonFileConfigStore
from skillradar.common.settings import AppSettings, load_settings

__all__ = ["AppSettings", "JsonFileConfigStore", "load_settings"]

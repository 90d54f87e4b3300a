"""
apps.config_entries.apps
"""
from django.apps import AppConfig


class ConfigEntriesConfig(AppConfig):
    name = "apps.config_entries"
    label = "config_entries"
    verbose_name = "Config Entries"

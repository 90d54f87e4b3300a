"""
Test settings – in-memory SQLite and a fixed secret so the suite runs
without any environment configuration.
"""
import os

os.environ.setdefault("SECRET_KEY", "insecure-test-only-secret-key")

from .base import *  # noqa: E402, F401, F403

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CONFIG_GATEWAY_DATACENTER = "dc1"
CONFIG_GATEWAY_TOKEN = ""
CONFIG_GATEWAY_BACKEND = "apps.config_store.backend.ORMConfigEntryBackend"
CONFIG_STORE_DATACENTERS = ["dc1", "dc2"]

LOGGING["root"]["level"] = "WARNING"  # noqa: F405

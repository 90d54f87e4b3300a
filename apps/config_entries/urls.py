"""
apps.config_entries.urls
~~~~~~~~~~~~~~~~~~~~~~~~
URL routing for the config entry API.
Mounted at /v1/ by the root URLconf.
"""
from django.urls import path, re_path

from .views import ConfigApplyView, ConfigEntryView

urlpatterns = [
    # PUT /v1/config
    path("config", ConfigApplyView.as_view(), name="config-apply"),
    # GET|DELETE /v1/config/<kind>[/<name>]
    re_path(r"^config/(?P<suffix>.*)$", ConfigEntryView.as_view(), name="config-entry"),
]

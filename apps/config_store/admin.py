"""
apps.config_store.admin
"""
from django.contrib import admin

from .models import StoredConfigEntry


@admin.register(StoredConfigEntry)
class StoredConfigEntryAdmin(admin.ModelAdmin):
    list_display = ["name", "kind", "datacenter", "modify_index", "updated_at"]
    list_filter = ["kind", "datacenter"]
    search_fields = ["name", "kind"]
    readonly_fields = ["id", "create_index", "modify_index", "created_at", "updated_at"]
    ordering = ["datacenter", "kind", "name"]

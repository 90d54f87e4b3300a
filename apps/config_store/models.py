"""
apps.config_store.models
~~~~~~~~~~~~~~~~~~~~~~~~~
StoredConfigEntry – the persisted form of a typed config entry.
StoreIndex        – the store-wide modification index.
"""
from django.db import models

from apps.config_entries.entries import ConfigEntry
from apps.config_entries.services import decode_config_entry


class StoredConfigEntry(models.Model):
    """
    One config entry as held by the authoritative store.

    ``payload`` is the entry's JSON wire form without its indexes; the
    indexes live in their own columns and are stamped by the store.
    """

    datacenter = models.CharField(max_length=64)
    kind = models.CharField(max_length=64)
    name = models.CharField(max_length=255)
    payload = models.JSONField(
        help_text="Entry in its JSON wire form, indexes excluded.",
    )
    create_index = models.PositiveBigIntegerField(default=0)
    modify_index = models.PositiveBigIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["datacenter", "kind", "name"]
        unique_together = [("datacenter", "kind", "name")]
        verbose_name = "Stored Config Entry"
        verbose_name_plural = "Stored Config Entries"

    def __str__(self) -> str:
        return f"{self.datacenter}/{self.kind}/{self.name}"

    def to_entry(self) -> ConfigEntry:
        """Decode the stored payload back into its typed entry."""
        entry = decode_config_entry(self.payload)
        entry.create_index = self.create_index
        entry.modify_index = self.modify_index
        return entry


class StoreIndex(models.Model):
    """
    Singleton row holding the store's modification index.

    Every write takes the next value under a row lock, so the index only
    ever grows, deletes included.
    """

    SINGLETON_ID = 1

    value = models.PositiveBigIntegerField(default=0)

    class Meta:
        verbose_name = "Store Index"
        verbose_name_plural = "Store Index"

    def __str__(self) -> str:
        return str(self.value)

    @classmethod
    def advance(cls) -> int:
        """Increment and return the index.  Must run inside a transaction."""
        counter, _ = cls.objects.select_for_update().get_or_create(pk=cls.SINGLETON_ID)
        counter.value += 1
        counter.save(update_fields=["value"])
        return counter.value

    @classmethod
    def current(cls) -> int:
        return (
            cls.objects.filter(pk=cls.SINGLETON_ID)
            .values_list("value", flat=True)
            .first()
            or 0
        )

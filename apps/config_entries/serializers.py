"""
apps.config_entries.serializers
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
I/O-only serializers for the config entry API.
No business logic; shape rendering only.
"""
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers


@extend_schema_field(OpenApiTypes.OBJECT)
class ConfigEntryField(serializers.Field):
    """Renders a typed config entry in its JSON wire form."""

    def to_representation(self, value):
        return value.to_dict()


class IndexedConfigEntriesSerializer(serializers.Serializer):
    """Response shape for GET /v1/config/{kind}[/{name}]."""

    Kind = serializers.CharField(source="kind")
    Entries = serializers.ListField(source="entries", child=ConfigEntryField())
    Index = serializers.IntegerField(source="index")
    KnownLeader = serializers.BooleanField(source="known_leader")

"""
apps.config_entries.entries
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Typed config entry shapes.

Each concrete entry is a dataclass subclass of :class:`ConfigEntry` carrying
its kind identifier in the ``kind`` class attribute and its wire shape in the
``FIELDS`` table (see :mod:`apps.config_entries.fields`).  Instances built
with no arguments are the zero value of their kind.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from .fields import (
    Boolean,
    Duration,
    FieldSpec,
    FreeformObject,
    Integer,
    ListOf,
    MapOf,
    String,
    Struct,
    encode_fields,
)

SERVICE_DEFAULTS = "service-defaults"
PROXY_DEFAULTS = "proxy-defaults"
SERVICE_RESOLVER = "service-resolver"


# ---------------------------------------------------------------------------
# Nested structures
# ---------------------------------------------------------------------------

@dataclass
class ConnectConfiguration:
    sidecar_proxy: bool = False

    FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        FieldSpec("SidecarProxy", "sidecar_proxy", Boolean()),
    )


@dataclass
class MeshGatewayConfig:
    """How traffic to a service is routed through mesh gateways."""

    mode: str = ""

    FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        FieldSpec("Mode", "mode", String()),
    )


@dataclass
class ServiceResolverSubset:
    filter: str = ""
    only_passing: bool = False

    FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        FieldSpec("Filter", "filter", String()),
        FieldSpec("OnlyPassing", "only_passing", Boolean()),
    )


@dataclass
class ServiceResolverRedirect:
    service: str = ""
    service_subset: str = ""
    namespace: str = ""
    datacenter: str = ""

    FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        FieldSpec("Service", "service", String()),
        FieldSpec("ServiceSubset", "service_subset", String()),
        FieldSpec("Namespace", "namespace", String()),
        FieldSpec("Datacenter", "datacenter", String()),
    )


@dataclass
class ServiceResolverFailover:
    service: str = ""
    service_subset: str = ""
    namespace: str = ""
    datacenters: list[str] = field(default_factory=list)

    FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        FieldSpec("Service", "service", String()),
        FieldSpec("ServiceSubset", "service_subset", String()),
        FieldSpec("Namespace", "namespace", String()),
        FieldSpec("Datacenters", "datacenters", ListOf(String())),
    )


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------

_NAME = FieldSpec("Name", "name", String())
_INDEXES = (
    FieldSpec("CreateIndex", "create_index", Integer()),
    FieldSpec("ModifyIndex", "modify_index", Integer()),
)


@dataclass
class ConfigEntry:
    """
    Base class for every typed config entry.

    Attributes:
        name: Unique name of the entry within its kind.
        create_index: Store index at which the entry was created.
        modify_index: Store index of the entry's last modification.
    """

    kind: ClassVar[str] = ""
    FIELDS: ClassVar[tuple[FieldSpec, ...]] = (_NAME, *_INDEXES)

    name: str = ""
    create_index: int = 0
    modify_index: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Encode the entry into its JSON wire form, ``Kind`` included."""
        data: dict[str, Any] = {"Kind": self.kind}
        data.update(encode_fields(self, self.FIELDS))
        return data


@dataclass
class ServiceConfigEntry(ConfigEntry):
    """Defaults applied to every instance of a single service."""

    kind: ClassVar[str] = SERVICE_DEFAULTS
    FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        _NAME,
        FieldSpec("Protocol", "protocol", String()),
        FieldSpec("Connect", "connect", Struct(ConnectConfiguration)),
        FieldSpec("MeshGateway", "mesh_gateway", Struct(MeshGatewayConfig)),
        FieldSpec("ExternalSNI", "external_sni", String()),
        *_INDEXES,
    )

    protocol: str = ""
    connect: ConnectConfiguration = field(default_factory=ConnectConfiguration)
    mesh_gateway: MeshGatewayConfig = field(default_factory=MeshGatewayConfig)
    external_sni: str = ""


@dataclass
class ProxyConfigEntry(ConfigEntry):
    """Global proxy defaults; ``config`` is opaque to the gateway."""

    kind: ClassVar[str] = PROXY_DEFAULTS
    FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        _NAME,
        FieldSpec("Config", "config", FreeformObject()),
        FieldSpec("MeshGateway", "mesh_gateway", Struct(MeshGatewayConfig)),
        *_INDEXES,
    )

    config: dict[str, Any] = field(default_factory=dict)
    mesh_gateway: MeshGatewayConfig = field(default_factory=MeshGatewayConfig)


@dataclass
class ServiceResolverConfigEntry(ConfigEntry):
    """
    Subsets, redirects and failover policy for one service.

    ``connect_timeout`` is held in nanoseconds and accepts either a number of
    nanoseconds or a duration string such as ``"15s"`` on the wire.
    """

    kind: ClassVar[str] = SERVICE_RESOLVER
    FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        _NAME,
        FieldSpec("DefaultSubset", "default_subset", String()),
        FieldSpec("Subsets", "subsets", MapOf(Struct(ServiceResolverSubset))),
        FieldSpec("Redirect", "redirect", Struct(ServiceResolverRedirect)),
        FieldSpec("Failover", "failover", MapOf(Struct(ServiceResolverFailover))),
        FieldSpec("ConnectTimeout", "connect_timeout", Duration()),
        *_INDEXES,
    )

    default_subset: str = ""
    subsets: dict[str, ServiceResolverSubset] = field(default_factory=dict)
    redirect: ServiceResolverRedirect | None = None
    failover: dict[str, ServiceResolverFailover] = field(default_factory=dict)
    connect_timeout: int = 0

"""
tests.test_config_api
~~~~~~~~~~~~~~~~~~~~~~
Integration tests for the config entry HTTP API and the ORM-backed store.

Covers:
- PUT    /v1/config
- GET    /v1/config/{kind}[/{name}]
- DELETE /v1/config/{kind}/{name}
- Query option and token parsing
- Health check, request ids, OpenAPI schema
"""
from __future__ import annotations

import pytest
from django.contrib import admin
from rest_framework import status
from rest_framework.test import APIClient

from apps.config_entries import views
from apps.config_entries.backends import get_backend
from apps.config_entries.structs import ConfigEntryQuery, IndexedConfigEntries
from apps.config_store.backend import ORMConfigEntryBackend
from apps.config_store.models import StoreIndex, StoredConfigEntry
from common.exceptions import BackendError

APPLY_URL = "/v1/config"


def entry_url(suffix: str) -> str:
    return f"/v1/config/{suffix}"


RESOLVER_BODY: dict = {
    "Kind": "service-resolver",
    "Name": "web",
    "DefaultSubset": "v1",
    "Subsets": {"v1": {"Filter": "Service.Meta.version == v1", "OnlyPassing": True}},
    "ConnectTimeout": "15s",
}


# ===========================================================================
# Fixtures
# ===========================================================================

@pytest.fixture
def api_client() -> APIClient:
    """Return an unauthenticated DRF APIClient."""
    return APIClient()


@pytest.fixture
def apply(api_client):
    """PUT a config entry body and assert it was accepted."""

    def _apply(body: dict, **params):
        url = APPLY_URL
        if params:
            url += "?" + "&".join(f"{k}={v}" for k, v in params.items())
        resp = api_client.put(url, data=body, format="json")
        assert resp.status_code == status.HTTP_200_OK, resp.content
        return resp

    return _apply


class RecordingBackend:
    def __init__(self) -> None:
        self.calls = []

    def rpc(self, method, args):
        self.calls.append((method, args))
        return IndexedConfigEntries(kind=getattr(args, "kind", ""))


@pytest.fixture
def recording_backend(monkeypatch) -> RecordingBackend:
    backend = RecordingBackend()
    monkeypatch.setattr(views, "get_backend", lambda: backend)
    return backend


# ===========================================================================
# TestApplyAndRead  (DB)
# ===========================================================================

@pytest.mark.django_db
class TestApplyAndRead:

    def test_apply_then_get_single_entry(self, api_client, apply):
        resp = apply(RESOLVER_BODY)
        assert resp.content == b""

        resp = api_client.get(entry_url("service-resolver/web"))
        assert resp.status_code == status.HTTP_200_OK
        body = resp.json()
        assert body["Kind"] == "service-resolver"
        assert body["Index"] == 1
        assert body["KnownLeader"] is True
        assert resp["X-Config-Index"] == "1"

        [entry] = body["Entries"]
        assert entry["Kind"] == "service-resolver"
        assert entry["Name"] == "web"
        assert entry["ConnectTimeout"] == "15s"
        assert entry["Subsets"]["v1"]["OnlyPassing"] is True
        assert entry["CreateIndex"] == 1
        assert entry["ModifyIndex"] == 1

    def test_lowercase_kind_key_accepted(self, api_client, apply):
        apply({"kind": "service-defaults", "Name": "api", "Protocol": "http"})
        body = api_client.get(entry_url("service-defaults/api")).json()
        assert body["Entries"][0]["Protocol"] == "http"

    def test_numeric_duration_accepted(self, api_client, apply):
        apply({"Kind": "service-resolver", "Name": "db", "ConnectTimeout": 5000000000})
        body = api_client.get(entry_url("service-resolver/db")).json()
        assert body["Entries"][0]["ConnectTimeout"] == "5s"

    def test_list_returns_entries_ordered_by_name(self, api_client, apply):
        for name in ("web", "api", "db"):
            apply({"Kind": "service-defaults", "Name": name})
        apply({"Kind": "proxy-defaults", "Name": "global"})

        body = api_client.get(entry_url("service-defaults")).json()
        assert body["Kind"] == "service-defaults"
        assert [e["Name"] for e in body["Entries"]] == ["api", "db", "web"]

    def test_get_missing_entry_returns_empty_collection(self, api_client):
        resp = api_client.get(entry_url("service-defaults/nope"))
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json()["Entries"] == []

    def test_reapply_bumps_modify_index_only(self, api_client, apply):
        apply({"Kind": "service-defaults", "Name": "web", "Protocol": "http"})
        apply({"Kind": "service-defaults", "Name": "other"})
        apply({"Kind": "service-defaults", "Name": "web", "Protocol": "grpc"})

        [entry] = api_client.get(entry_url("service-defaults/web")).json()["Entries"]
        assert entry["Protocol"] == "grpc"
        assert entry["CreateIndex"] == 1
        assert entry["ModifyIndex"] == 3
        assert StoredConfigEntry.objects.count() == 2

    def test_datacenters_are_isolated(self, api_client, apply):
        apply({"Kind": "service-defaults", "Name": "web"}, dc="dc2")

        assert api_client.get(entry_url("service-defaults/web")).json()["Entries"] == []
        body = api_client.get(entry_url("service-defaults/web"), {"dc": "dc2"}).json()
        assert len(body["Entries"]) == 1

    def test_unknown_datacenter_surfaces_backend_error(self, api_client):
        resp = api_client.get(entry_url("service-defaults/web"), {"dc": "dc9"})
        assert resp.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert resp.json() == {"code": "backend_error", "detail": "No path to datacenter"}


# ===========================================================================
# TestApplyErrors  (DB)
# ===========================================================================

@pytest.mark.django_db
class TestApplyErrors:

    def _put(self, api_client, body):
        return api_client.put(APPLY_URL, data=body, format="json")

    def test_missing_kind_400(self, api_client):
        resp = self._put(api_client, {"Name": "web"})
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp["Content-Type"].startswith("text/plain")
        assert resp.content.decode() == (
            "Request decoding failed: Payload does not contain a kind/Kind key at the top level"
        )

    def test_non_string_kind_400(self, api_client):
        resp = self._put(api_client, {"Kind": 12, "Name": "web"})
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert "Kind value in payload is not a string" in resp.content.decode()

    def test_unknown_kind_400(self, api_client):
        resp = self._put(api_client, {"Kind": "web", "Name": "api"})
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert "invalid config entry kind: web" in resp.content.decode()

    def test_type_mismatch_400(self, api_client):
        resp = self._put(api_client, {"Kind": "service-defaults", "Name": "web", "Connect": "yes"})
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert "'Connect' expected type 'object', got 'string'" in resp.content.decode()

    def test_malformed_json_400(self, api_client):
        resp = api_client.put(APPLY_URL, data="{not json", content_type="application/json")
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp.content.decode().startswith("Request decoding failed: ")

    def test_non_object_body_400(self, api_client):
        resp = self._put(api_client, ["service-defaults"])
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert "Payload must be a JSON object" in resp.content.decode()

    def test_rejected_payload_is_not_stored(self, api_client):
        self._put(api_client, {"Kind": "service-resolver", "Name": "web", "ConnectTimeout": "soon"})
        assert StoredConfigEntry.objects.count() == 0

    def test_out_of_range_numeric_duration_400(self, api_client):
        """A duration the store could not render back must be refused, not stored."""
        resp = self._put(
            api_client,
            {"Kind": "service-resolver", "Name": "x", "ConnectTimeout": 10**19},
        )
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert "'ConnectTimeout' expected type 'duration'" in resp.content.decode()
        assert StoredConfigEntry.objects.count() == 0

        listing = api_client.get(entry_url("service-resolver"))
        assert listing.status_code == status.HTTP_200_OK
        assert listing.json()["Entries"] == []

    def test_other_verbs_on_apply_405(self, api_client):
        resp = api_client.post(APPLY_URL, data={"Kind": "service-defaults"}, format="json")
        assert resp.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert resp["Allow"] == "PUT"


# ===========================================================================
# TestReadAndDeleteErrors  (DB)
# ===========================================================================

@pytest.mark.django_db
class TestReadAndDeleteErrors:

    def test_get_without_kind_400(self, api_client):
        resp = api_client.get(entry_url(""))
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp["Content-Type"].startswith("text/plain")
        assert resp.content.decode() == "Must provide either a kind or both kind and name"

    def test_delete_with_kind_only_400(self, api_client):
        resp = api_client.delete(entry_url("service-defaults"))
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp.content.decode() == "Must provide both a kind and name to delete"

    def test_delete_unknown_kind_400(self, api_client):
        resp = api_client.delete(entry_url("web/api"))
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp.content.decode() == "invalid config entry kind: web"

    @pytest.mark.parametrize("method", ["put", "post", "patch", "options", "head"])
    def test_other_verbs_405(self, api_client, method):
        resp = getattr(api_client, method)(entry_url("service-defaults/web"))
        assert resp.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert resp["Allow"] == "GET, DELETE"

    def test_put_405_names_method(self, api_client):
        resp = api_client.put(entry_url("service-defaults/web"))
        assert resp.content.decode() == "method PUT not allowed"


# ===========================================================================
# TestDelete  (DB)
# ===========================================================================

@pytest.mark.django_db
class TestDelete:

    def test_delete_removes_entry(self, api_client, apply):
        apply({"Kind": "service-defaults", "Name": "web"})
        apply({"Kind": "service-defaults", "Name": "api"})

        resp = api_client.delete(entry_url("service-defaults/web"))
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json() == {}

        names = [e["Name"] for e in api_client.get(entry_url("service-defaults")).json()["Entries"]]
        assert names == ["api"]

    def test_delete_missing_entry_is_idempotent(self, api_client):
        resp = api_client.delete(entry_url("service-defaults/ghost"))
        assert resp.status_code == status.HTTP_200_OK

    def test_delete_scoped_to_datacenter(self, api_client, apply):
        apply({"Kind": "service-defaults", "Name": "web"})
        apply({"Kind": "service-defaults", "Name": "web"}, dc="dc2")

        api_client.delete(entry_url("service-defaults/web") + "?dc=dc2")
        assert StoredConfigEntry.objects.filter(datacenter="dc1").count() == 1
        assert StoredConfigEntry.objects.filter(datacenter="dc2").count() == 0

    def test_index_never_decreases_across_deletes(self, api_client, apply):
        """Deleting the newest entry still advances the store index."""
        apply({"Kind": "service-defaults", "Name": "a"})
        apply({"Kind": "service-defaults", "Name": "b"})
        before = api_client.get(entry_url("service-defaults")).json()["Index"]
        assert before == 2

        api_client.delete(entry_url("service-defaults/b"))
        after = api_client.get(entry_url("service-defaults"))
        assert after.json()["Index"] == 3
        assert after["X-Config-Index"] == "3"

        apply({"Kind": "service-defaults", "Name": "c"})
        [entry] = api_client.get(entry_url("service-defaults/c")).json()["Entries"]
        assert entry["CreateIndex"] == entry["ModifyIndex"] == 4
        assert StoreIndex.current() == 4


# ===========================================================================
# TestRequestParsing  (recording backend)
# ===========================================================================

@pytest.mark.django_db
class TestRequestParsing:

    def test_query_options_pass_through(self, api_client, recording_backend):
        resp = api_client.get(entry_url("service-defaults/web") + "?stale&index=5&wait=30s&dc=dc2")
        assert resp.status_code == status.HTTP_200_OK

        [(verb, query)] = recording_backend.calls
        assert verb == "ConfigEntry.Get"
        assert query.datacenter == "dc2"
        assert query.options.allow_stale is True
        assert query.options.require_consistent is False
        assert query.options.min_query_index == 5
        assert query.options.max_query_time == 30_000_000_000

    def test_default_datacenter(self, api_client, recording_backend, settings):
        settings.CONFIG_GATEWAY_DATACENTER = "east"
        api_client.get(entry_url("service-defaults"))
        [(verb, query)] = recording_backend.calls
        assert verb == "ConfigEntry.List"
        assert query.datacenter == "east"

    def test_stale_and_consistent_conflict_400(self, api_client, recording_backend):
        resp = api_client.get(entry_url("service-defaults") + "?stale&consistent")
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert "conflicting semantics" in resp.content.decode()
        assert recording_backend.calls == []

    def test_invalid_index_400(self, api_client, recording_backend):
        resp = api_client.get(entry_url("service-defaults"), {"index": "abc"})
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp.content.decode() == "Invalid index"

    def test_invalid_wait_400(self, api_client, recording_backend):
        resp = api_client.get(entry_url("service-defaults"), {"wait": "forever"})
        assert resp.status_code == status.HTTP_400_BAD_REQUEST
        assert resp.content.decode() == "Invalid wait time"

    def test_token_query_param_wins(self, api_client, recording_backend):
        api_client.get(
            entry_url("service-defaults") + "?token=from-query",
            HTTP_X_CONFIG_TOKEN="from-header",
        )
        assert recording_backend.calls[0][1].options.token == "from-query"

    def test_token_header(self, api_client, recording_backend):
        api_client.get(entry_url("service-defaults"), HTTP_X_CONFIG_TOKEN="from-header")
        assert recording_backend.calls[0][1].options.token == "from-header"

    def test_bearer_token(self, api_client, recording_backend):
        api_client.delete(entry_url("service-defaults/web"), HTTP_AUTHORIZATION="Bearer from-bearer")
        assert recording_backend.calls[0][1].token == "from-bearer"

    def test_default_token(self, api_client, recording_backend, settings):
        settings.CONFIG_GATEWAY_TOKEN = "agent-token"
        api_client.put(APPLY_URL, data={"Kind": "service-defaults", "Name": "web"}, format="json")
        assert recording_backend.calls[0][1].token == "agent-token"


# ===========================================================================
# TestORMBackend  (DB)
# ===========================================================================

@pytest.mark.django_db
class TestORMBackend:

    def test_configured_backend_is_orm_store(self):
        assert isinstance(get_backend(), ORMConfigEntryBackend)

    def test_unknown_verb_raises_backend_error(self):
        with pytest.raises(BackendError, match="can't find method ConfigEntry.Watch"):
            ORMConfigEntryBackend().rpc("ConfigEntry.Watch", ConfigEntryQuery(datacenter="dc1"))

    def test_datacenter_outside_store_raises(self, settings):
        settings.CONFIG_STORE_DATACENTERS = ["dc1"]
        with pytest.raises(BackendError, match="No path to datacenter"):
            ORMConfigEntryBackend().rpc("ConfigEntry.List", ConfigEntryQuery(kind="x", datacenter="dc2"))

    def test_model_registered_in_admin(self):
        assert admin.site.is_registered(StoredConfigEntry)


# ===========================================================================
# TestAmbient  (DB)
# ===========================================================================

@pytest.mark.django_db
class TestAmbient:

    def test_health_check_200(self, api_client):
        resp = api_client.get("/health/")
        assert resp.status_code == status.HTTP_200_OK
        assert resp.json() == {"status": "ok", "store": "ok", "datacenter": "dc1"}

    def test_request_id_echoed(self, api_client):
        resp = api_client.get(entry_url("service-defaults"), HTTP_X_REQUEST_ID="req-123")
        assert resp["X-Request-ID"] == "req-123"

    def test_request_id_generated(self, api_client):
        resp = api_client.get("/health/")
        assert len(resp["X-Request-ID"]) == 32

    def test_openapi_schema_served(self, api_client):
        resp = api_client.get("/api/schema/")
        assert resp.status_code == status.HTTP_200_OK

"""
apps.config_entries.views
~~~~~~~~~~~~~~~~~~~~~~~~~~
Thin DRF API views for config entries.
All business logic is delegated to
:class:`~apps.config_entries.services.dispatcher.ConfigEntryDispatcher`.

Endpoints
---------
GET     /v1/config/{kind}          – List entries of a kind
GET     /v1/config/{kind}/{name}   – Fetch a single entry
DELETE  /v1/config/{kind}/{name}   – Delete an entry
PUT     /v1/config                 – Create or update an entry
"""
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.exceptions import ParseError
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.config_entries.backends import get_backend
from apps.config_entries.request_parsing import parse_read_scope, parse_write_scope
from apps.config_entries.services.dispatcher import ConfigEntryDispatcher
from common.exceptions import BadRequestError, MethodNotAllowedError
from .serializers import IndexedConfigEntriesSerializer

INDEX_HEADER = "X-Config-Index"

_SCOPE_PARAMETERS = [
    OpenApiParameter("dc", OpenApiTypes.STR, description="Target datacenter."),
    OpenApiParameter("token", OpenApiTypes.STR, description="ACL token."),
]

_READ_PARAMETERS = _SCOPE_PARAMETERS + [
    OpenApiParameter("stale", OpenApiTypes.BOOL, description="Allow stale reads."),
    OpenApiParameter("consistent", OpenApiTypes.BOOL, description="Require a consistent read."),
    OpenApiParameter("index", OpenApiTypes.INT, description="Minimum index for a blocking read."),
    OpenApiParameter("wait", OpenApiTypes.STR, description='Maximum blocking time, e.g. "30s".'),
]


class ConfigEntryView(APIView):
    """GET / DELETE /v1/config/{kind}[/{name}]"""

    http_method_names = ["get", "delete"]

    @extend_schema(
        summary="Read Config Entries",
        description=(
            "With both kind and name, fetches that entry; with only a kind, "
            "lists every entry of the kind."
        ),
        parameters=_READ_PARAMETERS,
        responses={
            200: IndexedConfigEntriesSerializer,
            400: OpenApiResponse(description="Neither a kind nor kind and name supplied."),
        },
        tags=["Config"],
    )
    def get(self, request: Request, suffix: str = "") -> Response:
        reply = self._dispatch(request, suffix)
        response = Response(
            IndexedConfigEntriesSerializer(reply).data,
            status=status.HTTP_200_OK,
        )
        response[INDEX_HEADER] = str(reply.index)
        return response

    @extend_schema(
        summary="Delete Config Entry",
        parameters=_SCOPE_PARAMETERS,
        responses={
            200: OpenApiResponse(description="Entry deleted (or already absent)."),
            400: OpenApiResponse(description="Missing kind/name or unknown kind."),
        },
        tags=["Config"],
    )
    def delete(self, request: Request, suffix: str = "") -> Response:
        self._dispatch(request, suffix)
        return Response({}, status=status.HTTP_200_OK)

    def http_method_not_allowed(self, request: Request, *args, **kwargs) -> Response:
        return self._dispatch(request, kwargs.get("suffix", ""))

    def _dispatch(self, request: Request, suffix: str):
        dispatcher = ConfigEntryDispatcher(get_backend())
        operation = dispatcher.route(request.method)
        if request.method == "GET":
            scope = parse_read_scope(request)
        else:
            scope = parse_write_scope(request)
        return operation(suffix, scope)


class ConfigApplyView(APIView):
    """PUT /v1/config – create or replace a config entry."""

    http_method_names = ["put"]

    @extend_schema(
        summary="Apply Config Entry",
        description=(
            "Decodes the JSON body according to its Kind/kind discriminator "
            "and upserts the resulting entry."
        ),
        request={"application/json": OpenApiTypes.OBJECT},
        parameters=_SCOPE_PARAMETERS,
        responses={
            200: OpenApiResponse(description="Entry applied."),
            400: OpenApiResponse(description="Body could not be decoded into a config entry."),
        },
        tags=["Config"],
    )
    def put(self, request: Request) -> Response:
        try:
            raw = request.data
        except ParseError as exc:
            raise BadRequestError(f"Request decoding failed: {exc.detail}") from exc

        ConfigEntryDispatcher(get_backend()).apply(raw, parse_write_scope(request))
        return Response(status=status.HTTP_200_OK)

    def http_method_not_allowed(self, request: Request, *args, **kwargs) -> Response:
        raise MethodNotAllowedError(request.method, ["PUT"])

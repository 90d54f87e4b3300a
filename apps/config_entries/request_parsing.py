"""
apps.config_entries.request_parsing
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Extracts datacenter, token and read options from an HTTP request.

Query parameters
----------------
dc          Target datacenter; defaults to ``CONFIG_GATEWAY_DATACENTER``.
token       ACL token (checked before the headers below).
stale       Flag; allow any server to answer.
consistent  Flag; require a verified leader.  Exclusive with ``stale``.
index       Minimum store index for a blocking read.
wait        Maximum blocking time as a duration string, e.g. ``"30s"``.

Headers
-------
X-Config-Token          ACL token.
Authorization: Bearer   ACL token, used when neither of the above is set.
"""
from __future__ import annotations

from django.conf import settings
from rest_framework.request import Request

from apps.config_entries.duration import DurationError, parse_duration
from apps.config_entries.structs import QueryOptions, RequestScope
from common.exceptions import BadRequestError

TOKEN_HEADER = "X-Config-Token"


def parse_datacenter(request: Request) -> str:
    return request.query_params.get("dc") or settings.CONFIG_GATEWAY_DATACENTER


def parse_token(request: Request) -> str:
    """Return the request's ACL token, falling back to the gateway default."""
    token = request.query_params.get("token")
    if token:
        return token

    token = request.headers.get(TOKEN_HEADER)
    if token:
        return token

    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()

    return settings.CONFIG_GATEWAY_TOKEN


def parse_query_options(request: Request, token: str) -> QueryOptions:
    """
    Build :class:`QueryOptions` from the read-only query parameters.

    Raises:
        BadRequestError: On conflicting consistency flags or malformed
            ``index`` / ``wait`` values.
    """
    params = request.query_params
    options = QueryOptions(
        token=token,
        allow_stale="stale" in params,
        require_consistent="consistent" in params,
    )
    if options.allow_stale and options.require_consistent:
        raise BadRequestError("Cannot specify ?stale with ?consistent, conflicting semantics.")

    index = params.get("index")
    if index:
        if not index.isdigit():
            raise BadRequestError("Invalid index")
        options.min_query_index = int(index)

    wait = params.get("wait")
    if wait:
        try:
            options.max_query_time = parse_duration(wait)
        except DurationError as exc:
            raise BadRequestError("Invalid wait time") from exc

    return options


def parse_write_scope(request: Request) -> RequestScope:
    """Scope for DELETE and PUT: datacenter and token only."""
    return RequestScope(
        datacenter=parse_datacenter(request),
        token=parse_token(request),
    )


def parse_read_scope(request: Request) -> RequestScope:
    """Scope for GET: datacenter, token and query options."""
    token = parse_token(request)
    return RequestScope(
        datacenter=parse_datacenter(request),
        token=token,
        options=parse_query_options(request, token),
    )

"""
common.health
~~~~~~~~~~~~~
GET /health/ – lightweight liveness + readiness probe.

Returns:
    200  {"status": "ok", "store": "ok", "datacenter": "dc1"}
    503  {"status": "degraded", "store": "error: <msg>", "datacenter": "dc1"}
"""
import structlog
from django.conf import settings
from django.db import OperationalError, connection
from django.http import JsonResponse

logger = structlog.get_logger(__name__)


def health_check(request):
    """Report whether the config store database is reachable."""
    try:
        connection.ensure_connection()
        store_status = "ok"
        http_status = 200
    except OperationalError as exc:
        store_status = f"error: {exc}"
        http_status = 503
        logger.error("health_check_store_failure", error=str(exc))

    payload = {
        "status": "ok" if http_status == 200 else "degraded",
        "store": store_status,
        "datacenter": settings.CONFIG_GATEWAY_DATACENTER,
    }
    return JsonResponse(payload, status=http_status)

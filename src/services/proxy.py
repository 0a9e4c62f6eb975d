"""Server-side fetch proxy boundary.

``handle_proxy_fetch({"url": ...})`` returns ``(status, body)`` where body is
``{"html": ...}`` on success or ``{"error": ...}`` otherwise.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Tuple

from core import http_client
from services.tie_import import Fetcher

_log = logging.getLogger(__name__)


def handle_proxy_fetch(
    payload: Mapping[str, Any] | None, *, fetcher: Optional[Fetcher] = None
) -> Tuple[int, dict]:
    url = (payload or {}).get("url")
    try:
        url = http_client.validate_url(url)
        html = (fetcher or http_client.fetch)(url)
    except http_client.InvalidInput as e:
        return 400, {"error": str(e)}
    except http_client.UpstreamError as e:
        _log.error("Upstream error for %s: %s %s", url, e.status, e.reason)
        return e.status, {"error": str(e)}
    except Exception as e:  # noqa: BLE001 - boundary maps everything else to 500
        _log.error("Proxy fetch error for %s", url, exc_info=True)
        message = str(e) if isinstance(e, http_client.TransportError) else f"Failed to fetch page: {e}"
        return 500, {"error": message}
    return 200, {"html": html}

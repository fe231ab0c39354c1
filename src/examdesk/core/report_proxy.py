"""Client for the external PDF report service.

POSTs a report payload to ``{service_url}/render`` and returns the PDF
bytes. Every call is bounded by the configured timeout; failures are
raised as ReportServiceError (502, or 504 on timeout).
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from examdesk.config.app_config import ReportsConfig
from examdesk.core.errors import ReportServiceError

logger = structlog.get_logger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


def render_remote(
    payload: dict[str, Any],
    filename: str,
    config: ReportsConfig,
    transport: httpx.BaseTransport | None = None,
) -> bytes:
    """Render a report through the report service.

    Args:
        payload: JSON body ({"template", "title", "data"})
        filename: Requested file name, forwarded as a hint
        config: Reports configuration with service_url and timeout
        transport: Optional httpx transport (tests use httpx.MockTransport)

    Returns:
        PDF bytes returned by the service

    Raises:
        ReportServiceError: On timeout, connection failure, non-2xx status
            or a response that is not a PDF
    """
    if not config.service_url:
        raise ReportServiceError("Report service URL is not configured")

    url = f"{config.service_url}/render"

    try:
        with httpx.Client(timeout=config.timeout, transport=transport) as client:
            response = client.post(url, json={**payload, "filename": filename})
    except httpx.TimeoutException as e:
        logger.warning("reports.proxy_timeout", url=url, timeout=config.timeout)
        raise ReportServiceError(
            f"Report service timed out after {config.timeout:g}s", timed_out=True
        ) from e
    except httpx.HTTPError as e:
        logger.warning("reports.proxy_failed", url=url, error=str(e))
        raise ReportServiceError(f"Report service unreachable: {e}") from e

    if response.status_code >= 400:
        logger.warning(
            "reports.proxy_failed",
            url=url,
            status_code=response.status_code,
        )
        raise ReportServiceError(
            f"Report service returned HTTP {response.status_code}"
        )

    content_type = response.headers.get("content-type", "")
    if not content_type.startswith(PDF_CONTENT_TYPE) and not response.content.startswith(b"%PDF"):
        raise ReportServiceError(
            f"Report service returned unexpected content type: {content_type or 'none'}"
        )

    logger.info("reports.proxied", url=url, size=len(response.content))
    return response.content

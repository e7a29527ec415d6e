"""
Logging utilities for request debugging and tracing.
"""
import logging
from typing import Dict, Mapping, Optional

import httpx

from headers import SENSITIVE_HEADERS
from session_auth.models import CallOptions

logger = logging.getLogger(__name__)


def redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Copy headers with credential values replaced"""
    return {
        name: "[REDACTED]" if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def log_request(request: httpx.Request, options: Optional[CallOptions] = None):
    """Log outbound request details with credentials redacted"""
    if not logger.isEnabledFor(logging.DEBUG):
        return

    logger.debug(f"{request.method} {request.url}")
    for name, value in redact_headers(request.headers).items():
        logger.debug(f"  {name}: {value}")
    if options:
        logger.debug(
            f"  options: retry={options.retry} "
            f"skip_error_tooltip={options.skip_error_tooltip} "
            f"skip_auth_refresh={options.skip_auth_refresh}"
        )


def log_response(request: httpx.Request, response: httpx.Response):
    logger.debug(f"{request.method} {request.url.path} -> {response.status_code}")

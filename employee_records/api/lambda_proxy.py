"""
Serverless request/response proxy.

Adapts API Gateway proxy-integration events (REST API v1 and HTTP API v2
shapes) to the shared `Router` and turns the router's response back into the
proxy result dictionary. Deploy with the handler `employee_records.api.lambda_proxy.handler`.
"""

from __future__ import annotations

import base64
import binascii
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional

from employee_records.api.router import ApiRequest, ApiResponse, Router
from employee_records.domain.errors import MalformedRequest
from employee_records.utils.logging import get_logger

log = get_logger(__name__)


def request_from_event(event: Mapping[str, Any]) -> ApiRequest:
    """
    Build an `ApiRequest` from a proxy event.

    Raises
    ------
    MalformedRequest
        If the body is flagged as base64 but does not decode.
    """
    http_context = (event.get("requestContext") or {}).get("http") or {}
    method = event.get("httpMethod") or http_context.get("method") or "GET"
    path = event.get("path") or event.get("rawPath") or http_context.get("path") or "/"

    body: Optional[Any] = event.get("body")
    if body is not None and event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise MalformedRequest("Request body is not valid base64") from exc

    query = {
        str(key): str(value)
        for key, value in (event.get("queryStringParameters") or {}).items()
        if value is not None
    }
    return ApiRequest(method=method, path=path, body=body, query=query)


def response_to_event(response: ApiResponse) -> Dict[str, Any]:
    return {
        "statusCode": response.status,
        "headers": dict(response.headers),
        "body": response.body if response.body is not None else "",
        "isBase64Encoded": False,
    }


class LambdaProxy:
    """Callable handler bound to one router."""

    def __init__(self, router: Router) -> None:
        self._router = router

    def __call__(self, event: Mapping[str, Any], context: Any = None) -> Dict[str, Any]:
        try:
            api_request = request_from_event(event)
        except MalformedRequest as exc:
            log.warning(f"Rejected event: {exc}")
            return response_to_event(ApiResponse.error(400, str(exc)))
        return response_to_event(self._router.dispatch(api_request))


@lru_cache(maxsize=1)
def _default_proxy() -> LambdaProxy:
    # Built on the first invocation and reused for the life of the process.
    from employee_records.bootstrap import build_container
    from employee_records.config import get_settings
    from employee_records.utils.logging import configure_logging

    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json, force=False)
    container = build_container(settings)
    log.info("Lambda proxy initialized", extra={"app_env": settings.app_env})
    return LambdaProxy(container.router)


def handler(event: Mapping[str, Any], context: Any = None) -> Dict[str, Any]:
    """Function entry point for the serverless runtime."""
    return _default_proxy()(event, context)


__all__ = [
    "LambdaProxy",
    "handler",
    "request_from_event",
    "response_to_event",
]

"""
Standalone HTTP listener.

A FastAPI application with a single catch-all route that forwards every method
and path to the shared `Router`. Routing lives in the router, not in FastAPI
path operations, so this transport and the serverless proxy cannot diverge.

Run with:
    employee-records serve --port 8080
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable, Optional

from fastapi import FastAPI, Request, Response
from starlette.concurrency import run_in_threadpool

from employee_records.api.router import ApiRequest, ApiResponse, Router

_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


def to_api_request(request: Request, body: bytes) -> ApiRequest:
    return ApiRequest(
        method=request.method,
        path=request.url.path,
        body=body or None,
        query=dict(request.query_params),
    )


def to_http_response(api_response: ApiResponse) -> Response:
    return Response(
        content=api_response.body if api_response.body is not None else b"",
        status_code=api_response.status,
        headers=api_response.headers,
    )


def create_http_app(
    router: Router,
    on_shutdown: Optional[Callable[[], None]] = None,
) -> FastAPI:
    """
    Build the FastAPI application around `router`.

    Parameters
    ----------
    router : Router
        Shared dispatcher; store calls block, so dispatch runs in the worker
        thread pool rather than on the event loop.
    on_shutdown : callable, optional
        Invoked once when the server stops (e.g. to close the connection pool).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        yield
        if on_shutdown is not None:
            on_shutdown()

    app = FastAPI(
        title="Employee Records",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.router = router

    @app.api_route("/{path:path}", methods=_METHODS, include_in_schema=False)
    async def dispatch(request: Request) -> Response:
        body = await request.body()
        api_response = await run_in_threadpool(router.dispatch, to_api_request(request, body))
        return to_http_response(api_response)

    return app


__all__ = ["create_http_app", "to_api_request", "to_http_response"]

from __future__ import annotations

import asyncio
import logging

from starlette.requests import Request
from starlette.responses import Response

from backend import main
from backend.middleware_perf import RequestTimingMiddleware


def test_health() -> None:
    assert main.health() == {"status": "ok", "message": "Checkout backend is running"}


def test_routes_are_registered() -> None:
    paths = set(main.app.openapi()["paths"])

    assert {
        "/api/plans",
        "/api/checkout/enterprise",
        "/api/checkout/starter-pro",
        "/api/checkout/one-time",
        "/api/checkout/verify",
        "/api/offers/preview",
        "/api/admin/offers",
        "/api/admin/offers/{code}/enable",
        "/api/admin/offers/{code}/disable",
        "/api/admin/offers/{code}",
        "/api/thank-you/contract",
    } <= paths


def test_request_timing_middleware_logs(caplog) -> None:
    async def passthrough(scope, receive, send) -> None:
        return None

    async def call_next(request: Request) -> Response:
        return Response(status_code=204)

    middleware = RequestTimingMiddleware(passthrough)
    request = Request({"type": "http", "method": "GET", "path": "/api/plans", "headers": [], "query_string": b""})

    with caplog.at_level(logging.INFO, logger="checkout.http"):
        response = asyncio.run(middleware.dispatch(request, call_next))

    assert response.status_code == 204
    assert "GET /api/plans -> 204" in caplog.text

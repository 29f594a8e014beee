"""
Duet Backend — Middleware Tests
=================================

What we test:
    ✅ Sliding window allows `limit` hits, then reports retry-after
    ✅ Old hits age out of the window
    ✅ Idle keys are pruned
    ✅ Request ids: client value reused when safe, generated otherwise
    ✅ 429 response shape from the middleware
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.middleware.rate_limit import RateLimitMiddleware, SlidingWindowLimiter
from app.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, resolve_request_id


class TestSlidingWindowLimiter:
    def test_limit_and_retry_after(self):
        limiter = SlidingWindowLimiter(limit=2, window=60)

        assert limiter.hit("1.2.3.4", now=0.0) is None
        assert limiter.hit("1.2.3.4", now=1.0) is None
        assert limiter.hit("1.2.3.4", now=10.0) == 51

    def test_keys_are_independent(self):
        limiter = SlidingWindowLimiter(limit=1, window=60)

        assert limiter.hit("a", now=0.0) is None
        assert limiter.hit("b", now=0.0) is None
        assert limiter.hit("a", now=1.0) is not None

    def test_hits_age_out(self):
        limiter = SlidingWindowLimiter(limit=1, window=60)

        assert limiter.hit("a", now=0.0) is None
        assert limiter.hit("a", now=59.0) == 2
        assert limiter.hit("a", now=60.0) is None

    def test_rejected_hits_are_not_counted(self):
        limiter = SlidingWindowLimiter(limit=1, window=60)
        limiter.hit("a", now=0.0)
        for t in range(1, 30):
            limiter.hit("a", now=float(t))
        assert limiter.hit("a", now=61.0) is None

    def test_prune(self):
        limiter = SlidingWindowLimiter(limit=5, window=60)
        limiter.hit("old", now=0.0)
        limiter.hit("new", now=100.0)

        assert limiter.prune(now=120.0) == 1
        assert len(limiter) == 1


class TestRequestId:
    def test_reuses_safe_client_value(self):
        assert resolve_request_id("abc-123") == "abc-123"

    @pytest.mark.parametrize("value", [None, "", "has space", "x" * 65, "bad\nheader"])
    def test_generates_otherwise(self, value):
        rid = resolve_request_id(value)
        assert rid != value
        assert len(rid) == 12


def small_app(limit: int) -> FastAPI:
    app = FastAPI()

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware, limit=limit, window=60)
    return app


class TestMiddlewareChain:
    @pytest.mark.asyncio
    async def test_rate_limited_response(self):
        transport = ASGITransport(app=small_app(limit=2))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/ping")).status_code == 200
            assert (await client.get("/ping")).status_code == 200
            response = await client.get("/ping")

        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) >= 1
        body = response.json()
        assert body["error"] == "rate_limit_exceeded"
        assert "retry_after" in body["details"]

    @pytest.mark.asyncio
    async def test_forwarded_clients_are_counted_separately(self):
        transport = ASGITransport(app=small_app(limit=1))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            first = await client.get("/ping", headers={"X-Forwarded-For": "10.0.0.1"})
            second = await client.get("/ping", headers={"X-Forwarded-For": "10.0.0.2, 172.16.0.1"})

        assert first.status_code == second.status_code == 200

    @pytest.mark.asyncio
    async def test_request_id_header(self):
        transport = ASGITransport(app=small_app(limit=10))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            echoed = await client.get("/ping", headers={REQUEST_ID_HEADER: "trace-42"})
            generated = await client.get("/ping")

        assert echoed.headers[REQUEST_ID_HEADER] == "trace-42"
        assert len(generated.headers[REQUEST_ID_HEADER]) == 12

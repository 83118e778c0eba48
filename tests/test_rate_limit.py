from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.middleware.rate_limit import SlidingWindowRateLimiter, rate_limit_middleware


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_limit_within_window():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(limit=2, window_seconds=10, clock=clock)

    assert limiter.hit("1.2.3.4")[0]
    assert limiter.hit("1.2.3.4")[0]

    allowed, retry_after = limiter.hit("1.2.3.4")
    assert not allowed
    assert retry_after == 10


def test_window_slides():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(limit=2, window_seconds=10, clock=clock)

    limiter.hit("k")
    clock.now += 6
    limiter.hit("k")
    assert not limiter.hit("k")[0]

    # first hit leaves the window, second is still inside
    clock.now += 4
    assert limiter.hit("k")[0]
    assert not limiter.hit("k")[0]


def test_keys_are_independent():
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60, clock=FakeClock())

    assert limiter.hit("a")[0]
    assert limiter.hit("b")[0]
    assert not limiter.hit("a")[0]


async def test_middleware_returns_429():
    clock = FakeClock()
    app = FastAPI()
    app.middleware("http")(rate_limit_middleware(SlidingWindowRateLimiter(1, 30, clock=clock)))

    @app.get("/ping")
    def ping():
        return {"ok": True}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        first = await ac.get("/ping")
        second = await ac.get("/ping")
        clock.now += 30
        third = await ac.get("/ping")

    assert first.status_code == 200
    assert second.status_code == 429
    assert second.headers["Retry-After"] == "30"
    assert third.status_code == 200


def test_idle_keys_are_forgotten():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(limit=5, window_seconds=60, clock=clock)

    for i in range(10_000):
        limiter.hit(f"10.0.{i // 256}.{i % 256}")
    assert len(limiter._hits) == 10_000

    clock.now += 3600
    assert limiter.hit("192.168.0.1")[0]

    assert list(limiter._hits) == ["192.168.0.1"]


def test_expired_key_starts_fresh():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=10, clock=clock)

    limiter.hit("a")
    clock.now += 5
    limiter.hit("b")
    clock.now += 5
    # a's hit has just left the window, b's has not
    assert limiter.hit("a")[0]
    assert not limiter.hit("b")[0]
    assert set(limiter._hits) == {"a", "b"}

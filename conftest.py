# conftest.py
import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.services.backend import OrderBackend
from app.services.payment import PaymentClient
from app.services.store import CustomerStore, MemoryStorage

BACKEND = "http://backend.test/"
PAYMENT = "http://payment.test"


class FakeSleep:
    """Records requested delays instead of waiting."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


class Recorder:
    """httpx MockTransport handler with canned answers per (method, path)."""

    def __init__(self):
        self.requests = []
        self.routes = {}

    def on(self, method, path, response):
        self.routes[(method, path)] = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        resp = self.routes.get((request.method, request.url.path))
        if resp is None:
            return httpx.Response(404, json={"errorMessage": "no route"})
        if isinstance(resp, Exception):
            raise resp
        # fresh copy, a Response cannot be sent twice
        return httpx.Response(resp.status_code, headers=resp.headers, content=resp.content)

    def calls(self, method, path):
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def json_body(self, method, path, index=0):
        return json.loads(self.calls(method, path)[index].content)


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def store():
    return CustomerStore(MemoryStorage())


@pytest.fixture
def payment_http():
    return Recorder()


@pytest.fixture
def backend_http():
    rec = Recorder()
    rec.on("POST", "/api/orders", httpx.Response(201, json={"ok": True}))
    rec.on("GET", "/api/checkin/", httpx.Response(200, json={"ok": True}))
    return rec


@pytest.fixture
def payment_client(payment_http, fake_sleep):
    return PaymentClient(PAYMENT, timeout=5, transport=httpx.MockTransport(payment_http), sleep=fake_sleep)


@pytest.fixture
def order_backend(backend_http):
    return OrderBackend(BACKEND, timeout=5, transport=httpx.MockTransport(backend_http))


@pytest.fixture
def client(store, payment_client, order_backend, fake_sleep):
    cfg = Settings(STORE_BACKEND="memory", BACKEND_URL=BACKEND, PAYMENT_API_URL=PAYMENT)
    app = create_app(cfg, store=store, payment=payment_client, backend=order_backend, sleep=fake_sleep)
    with TestClient(app) as c:
        yield c

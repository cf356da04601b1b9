# app/main.py
import asyncio
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, settings as default_settings
from app.db import Base, make_engine, make_session_factory
from app.logging_config import configure_logging
from app.middleware import RequestIdMiddleware
from app.routers import catalog, customers, orders
from app.services.backend import OrderBackend
from app.services.checkout import ScreenRegistry
from app.services.payment import PaymentClient
from app.services.store import CustomerStorage, CustomerStore, JsonFileStorage, MemoryStorage, SqlStorage

log = logging.getLogger(__name__)


def build_storage(cfg: Settings) -> CustomerStorage:
    backend = cfg.STORE_BACKEND.lower()
    if backend == "memory":
        return MemoryStorage()
    if backend == "sql":
        engine = make_engine(cfg.DB_URL)
        Base.metadata.create_all(bind=engine)
        return SqlStorage(make_session_factory(engine))
    if backend == "json":
        return JsonFileStorage(cfg.STORE_PATH)
    raise ValueError(f"unknown STORE_BACKEND: {cfg.STORE_BACKEND}")


def create_app(
    cfg: Settings | None = None,
    store: CustomerStore | None = None,
    payment: PaymentClient | None = None,
    backend: OrderBackend | None = None,
    sleep=asyncio.sleep,
) -> FastAPI:
    """Build the service. Collaborators not passed in are built from ``cfg``."""
    cfg = cfg or default_settings
    app = FastAPI(title="Counter Checkout API", version="0.1.0")

    app.state.settings = cfg
    app.state.store = store
    app.state.payment = payment or PaymentClient(
        cfg.PAYMENT_API_URL, timeout=cfg.HTTP_TIMEOUT, fallback_delay=cfg.FALLBACK_DELAY_SEC, sleep=sleep
    )
    app.state.backend = backend or OrderBackend(cfg.BACKEND_URL, timeout=cfg.HTTP_TIMEOUT)

    @app.on_event("startup")
    def init_store():
        # loaded once per process, saved after every change
        if app.state.store is None:
            app.state.store = CustomerStore(build_storage(cfg))
        app.state.screens = ScreenRegistry(
            app.state.store,
            app.state.payment,
            app.state.backend,
            currency=cfg.CURRENCY,
            success_delay=cfg.SUCCESS_DELAY_SEC,
            sleep=sleep,
        )
        log.info("checkout service started", extra={"extra": {"env": cfg.APP_ENV, "store_backend": cfg.STORE_BACKEND}})

    # Middlewares
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(catalog.router)
    app.include_router(customers.router)
    app.include_router(orders.router)

    @app.get("/healthz")
    def healthz():
        return {
            "ok": True,
            "store_backend": cfg.STORE_BACKEND,
            "payment_gateway_configured": bool(cfg.ANZ_API_KEY and cfg.ANZ_MERCHANT_ID),
        }

    return app


configure_logging(default_settings.LOG_LEVEL, default_settings.LOG_DIR)
app = create_app()

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.rate_limiting import RateLimitMiddleware
from api.routers import eligibility, reference
from compliance.audit_logger import AuditLogger
from compliance.distance import AirportDistanceResolver
from compliance.eligibility_engine import EligibilityEngine
from logging_config import setup_logging
from memory.reference_cache import ReferenceDataCache
from reference.registry import ReferenceDataRegistry
from settings import SETTINGS
from tools.aviation_client import AviationReferenceClient
from tools.eligibility_tools import EligibilityTools


def build_eligibility_tools(registry: ReferenceDataRegistry | None = None, audit_log_path: str | None = None) -> EligibilityTools:
    registry = registry or ReferenceDataRegistry()
    engine = EligibilityEngine(distance_resolver=AirportDistanceResolver.from_registry(registry))
    return EligibilityTools(
        engine=engine,
        cache=ReferenceDataCache(),
        aviation_client=AviationReferenceClient(registry=registry),
        audit_logger=AuditLogger(audit_log_path),
    )


def create_app(tools: EligibilityTools | None = None, requests_per_minute: int | None = None) -> FastAPI:
    setup_logging(SETTINGS.log_level)
    eligibility_tools = tools or build_eligibility_tools()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        eligibility_tools.cache.start_sweeper()
        try:
            yield
        finally:
            await eligibility_tools.cache.stop_sweeper()

    app = FastAPI(title="PlaneProtect Eligibility", version="0.1.0", lifespan=lifespan)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RateLimitMiddleware, requests_per_minute=requests_per_minute)
    app.state.eligibility_tools = eligibility_tools

    api_prefix = "/api/v1"
    app.include_router(eligibility.router, prefix=api_prefix)
    app.include_router(reference.router, prefix=api_prefix)

    @app.get("/health")
    async def health():
        registry = eligibility_tools.aviation_client.registry
        return {
            "ok": True,
            "service": "planeprotect-eligibility",
            "routes_version": registry.routes_version(),
            "curated_routes": len(eligibility_tools.engine.distance_resolver.route_distances),
            "remote_reference_data": eligibility_tools.aviation_client.remote_enabled(),
            "cached_entries": len(eligibility_tools.cache),
        }

    return app


app = create_app()

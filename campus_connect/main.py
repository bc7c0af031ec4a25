from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from campus_connect.api.errors import register_error_handlers
from campus_connect.api.routes.router import router as api_router
from campus_connect.core.config import settings
from campus_connect.core.logging import configure_logging
from campus_connect.db import get_database
from campus_connect.middleware.rate_limit import RateLimitMiddleware
from campus_connect.middleware.request_id import RequestIdMiddleware
from campus_connect.middleware.security_headers import SecurityHeadersMiddleware

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        get_database().create_all()
    yield
    get_database().dispose()


app = FastAPI(title="Campus Connect API", lifespan=lifespan)

# Starlette runs the last added middleware first (outermost).
# RequestId and SecurityHeaders wrap everything, CORS answers preflights,
# RateLimit sits closest to the routes.
app.add_middleware(RateLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials="*" not in settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIdMiddleware)

register_error_handlers(app)

Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)


@app.get("/")
def root():
    return {"name": "Campus Connect API", "status": "ok"}


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(api_router, prefix=settings.api_prefix)

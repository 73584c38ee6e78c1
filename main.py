"""
5dpapa Backend - Application Entry Point
==========================================
FastAPI app initialization, security pipeline, and router registration.

Request flow:
    CORS -> CSRF (cookie-authenticated writes) -> principal -> authorization -> route
"""

import logging
import re
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from config.database import create_schema
from common.exceptions import ShopError
from common.helpers import now_utc
from common.problems import problem_response, register_exception_handlers
from common.security import (
    CSRF_PROTECTED_METHODS, csrf_check, has_bearer_credentials, new_csrf_token, set_csrf_cookie,
)
from modules.auth.policy import authorize, is_csrf_exempt
from modules.auth.principal import extract_principal

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("fivepapa.app")

# ==========================================
# Import ALL models so Alembic/Base can see them
# ==========================================
from modules.user.models import User  # noqa: F401,E402
from modules.catalog.models import Category, Product  # noqa: F401,E402
from modules.cart.models import Cart, CartItem  # noqa: F401,E402

# ==========================================
# Import routers
# ==========================================
from modules.auth.routes import router as auth_router  # noqa: E402
from modules.catalog.routes import product_router, category_router  # noqa: E402
from modules.cart.routes import router as cart_router  # noqa: E402
from modules.user.routes import router as user_router  # noqa: E402


@asynccontextmanager
async def lifespan(app):
    # Auto-create any missing tables (safe for existing tables)
    create_schema()
    logger.info(f"{settings.APP_NAME} started (profile: {settings.APP_PROFILE})")
    yield


# ==========================================
# Create App
# ==========================================
app = FastAPI(
    title="5dpapa Backend",
    description="E-commerce API: auth, catalog and per-user carts",
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan,
)

register_exception_handlers(app)


# ==========================================
# Middleware: Security Pipeline
# ==========================================
@app.middleware("http")
async def security_pipeline(request: Request, call_next):
    """
    CSRF check, principal extraction and route authorization.
    Errors are rendered here; exceptions raised in middleware never reach
    the app's exception handlers.
    """
    method, path = request.method, request.url.path
    try:
        if (
            method in CSRF_PROTECTED_METHODS
            and not has_bearer_credentials(request)
            and not is_csrf_exempt(method, path)
        ):
            csrf_check(request)

        principal = extract_principal(request)
        request.state.principal = principal
        authorize(method, path, principal)
    except ShopError as e:
        return problem_response(e, request)

    return await call_next(request)


# ==========================================
# Middleware: CORS (added last, runs first)
# ==========================================
def origin_regex(patterns) -> str:
    """'http://localhost:*' -> any (or no) port on localhost."""
    parts = []
    for pattern in patterns:
        escaped = re.escape(pattern).replace(r":\*", r"(:\d+)?").replace(r"\*", r"[^/]*")
        parts.append(escaped)
    return "^(?:" + "|".join(f"(?:{p})" for p in parts) + ")$"


app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=origin_regex(settings.CORS_ALLOWED_ORIGINS),
    allow_credentials=True,
    allow_methods=settings.CORS_ALLOWED_METHODS,
    allow_headers=settings.CORS_ALLOWED_HEADERS,
    expose_headers=settings.CORS_EXPOSED_HEADERS,
    max_age=3600,
)


# ==========================================
# Register Routers
# ==========================================
app.include_router(auth_router)
app.include_router(product_router)
app.include_router(category_router)
app.include_router(cart_router)
app.include_router(user_router)


# ==========================================
# Banner, Health & CSRF token
# ==========================================
@app.get("/")
async def root():
    endpoints = {
        "health": "/health",
        "register": "/api/auth/register",
        "login": "/api/auth/login",
        "csrf": "/api/csrf",
    }
    if settings.DEBUG:
        endpoints["docs"] = "/docs"
    return {
        "message": f"{settings.APP_NAME} is running",
        "status": "running",
        "timestamp": now_utc().isoformat(),
        "profile": settings.APP_PROFILE,
        "endpoints": endpoints,
    }


@app.get("/health")
async def health():
    return {"status": "UP", "timestamp": now_utc().isoformat()}


@app.get("/api/csrf")
async def csrf_token(response: Response):
    """Issue a fresh double-submit token (cookie + response header)."""
    token = new_csrf_token()
    set_csrf_cookie(response, token)
    return {
        "token": token,
        "headerName": settings.CSRF_HEADER,
        "parameterName": settings.CSRF_PARAMETER,
    }

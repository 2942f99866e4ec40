"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from syariahos.core.config import settings
from syariahos.core.errors import register_exception_handlers
from syariahos.core.structured_logging import configure_logging
from syariahos.db.session import engine

configure_logging(settings.ENV)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        send_default_pii=False,
    )
    logging.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi.middleware import SlowAPIMiddleware

from syariahos.core.rate_limit import limiter

# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="SyariahOS API",
    description="Task tracking, Islamic reference and admin API for sharia-compliant businesses",
    version=settings.VERSION,
)

app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)  # applies RATE_LIMIT_API to every route
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept"],
    expose_headers=["Content-Disposition"],
)

# ============================================================================
# Routers
# ============================================================================

from syariahos.routers import (
    admin_logs,
    admin_stats,
    admin_tools,
    admin_users,
    ai,
    auth,
    categories,
    dashboard,
    directory,
    internal,
    islamic,
    profile,
    tasks,
    tools,
)

app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(tasks.router)
app.include_router(categories.router)
app.include_router(dashboard.router)
app.include_router(directory.router)
app.include_router(tools.router)
app.include_router(ai.router)
app.include_router(islamic.router)

# Admin panel (admin role only)
app.include_router(admin_users.router)
app.include_router(admin_tools.router)
app.include_router(admin_logs.router)
app.include_router(admin_stats.router)

# Internal endpoints (scheduled/cron jobs - protected by INTERNAL_SECRET)
app.include_router(internal.router)


@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}

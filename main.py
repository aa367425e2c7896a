# main.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

# ------------------------------------------------------------
# CORE: settings, logging, store
# ------------------------------------------------------------
from signup.core.config import Settings, get_settings
from signup.core.logging_config import setup_logging
from signup.db.session import Database

# Session registry + attendance ledger (built once per app)
from signup.services.session_registry import SessionRegistry
from signup.services.attendance_ledger import AttendanceLedger

# Routers (/api/sessions, /api/attendance)
from signup.api.routes import router as api_router

log = logging.getLogger("signup.api")


# ------------------------------------------------------------
# FASTAPI APPLICATION
# ------------------------------------------------------------
def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the FastAPI application and the components it serves."""
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=(
            "Create sessions with an optional capacity and public or "
            "invite-only visibility; participants join and cancel with "
            "the codes handed out by the API."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # --------------------------------------------------------
    # STORE + COMPONENTS
    # --------------------------------------------------------
    database = database or Database(settings.DATABASE_URL)
    if settings.AUTO_CREATE_TABLES:
        database.create_all()

    registry = SessionRegistry(database, settings)
    app.state.settings = settings
    app.state.database = database
    app.state.registry = registry
    app.state.ledger = AttendanceLedger(database, registry)

    # --------------------------------------------------------
    # CORS
    # --------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --------------------------------------------------------
    # ROUTES
    # --------------------------------------------------------
    app.include_router(api_router)

    @app.get("/", tags=["root"])
    def root():
        return {
            "status": "online",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    @app.get("/api/version", tags=["system"])
    def version():
        """Application version (APP_VERSION env)."""
        return {"version": settings.APP_VERSION}

    @app.get("/api/healthz", tags=["system"])
    def healthz():
        """API + database reachability."""
        if not database.ping():
            # 503 = Service Unavailable
            raise HTTPException(
                status_code=503,
                detail={"status": "degraded", "db": "error", "version": settings.APP_VERSION},
            )
        return {"status": "ok", "db": "ok", "version": settings.APP_VERSION}

    # --------------------------------------------------------
    # SHUTDOWN
    # --------------------------------------------------------
    @app.on_event("shutdown")
    def _on_shutdown():
        database.dispose()

    log.info("application ready (db backend: %s)", "sqlite" if database.is_sqlite else "server")
    return app


# ------------------------------------------------------------
# APPLICATION INSTANCE
# ------------------------------------------------------------
app = create_app()

# ------------------------------------------------------------
# LOCAL RUN
# ------------------------------------------------------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)

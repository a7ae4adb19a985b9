"""SOS Relay: distress report intake with live operator dashboards."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sos_relay.config import Settings, settings as default_settings
from sos_relay.errors import IntakeError
from sos_relay.fanout import ChannelRegistry
from sos_relay.pipelines.intake import IntakeService
from sos_relay.routers import audit, files, reports, ws
from sos_relay.services.database import Database
from sos_relay.services.object_storage import build_object_storage
from sos_relay.services.report_store import ReportStore

logging.basicConfig(level=default_settings.log_level.upper())
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the database, build the intake service; dispose on shutdown."""
        db = Database(settings.database_url)
        db.create_all()
        if db.verify_connection():
            logger.info("Database connection verified (SELECT 1 OK)")
        else:
            logger.warning("Database connection verify failed")

        if settings.visibility_delay_seconds > 0:
            logger.info("Pending reports hidden for %ds after submission", settings.visibility_delay_seconds)

        app.state.db = db
        app.state.intake = IntakeService(
            store=ReportStore(db, visibility_delay_seconds=settings.visibility_delay_seconds),
            storage=build_object_storage(settings),
            fanout=ChannelRegistry(),
            reacknowledge_overwrites=settings.reacknowledge_overwrites,
        )
        logger.info("SOS Relay backend started (storage: %s)", settings.storage_backend)
        yield
        db.close()
        logger.info("SOS Relay backend stopped")

    app = FastAPI(
        title="SOS Relay",
        description="Anonymous distress reports with live operator dashboards",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(IntakeError)
    async def intake_error_handler(request: Request, exc: IntakeError):
        if exc.status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed request bodies get the same failure shape as rejected identifiers."""
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
            for err in exc.errors()
        )
        logger.info("%s %s rejected: %s", request.method, request.url.path, problems)
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": f"Invalid input: {problems}"},
        )

    app.include_router(reports.router)
    app.include_router(audit.router)
    app.include_router(ws.router)
    app.include_router(files.router)

    @app.get("/health")
    async def health(request: Request):
        """Health check."""
        state = request.app.state
        return {
            "status": "ok",
            "database": state.db.verify_connection(),
            "live_viewers": len(state.intake.fanout),
        }

    return app


app = create_app()

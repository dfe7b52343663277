from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from logging.handlers import RotatingFileHandler

from recap.config import get_settings
from recap.errors import ServiceError
from recap.models.base import init_db
from recap.api.action_items import router as action_items_router
from recap.api.meetings import router as meetings_router
from recap.api.share import router as share_router
from recap.api.stats import router as stats_router


settings = get_settings()


def configure_logging() -> None:
    settings.ensure_dirs()
    log_file = settings.logs_dir / "backend.log"
    root = logging.getLogger()
    if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        handler = RotatingFileHandler(str(log_file), maxBytes=5_000_000, backupCount=2)
        handler.setFormatter(logging.Formatter(fmt='%(asctime)s %(levelname)s %(name)s %(message)s'))
        root.addHandler(handler)
    root.setLevel(logging.INFO)


def create_app() -> FastAPI:
    app = FastAPI(title="Recap Backend", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    def _startup() -> None:
        try:
            configure_logging()
        except OSError:
            logging.getLogger("recap").warning("File logging unavailable, continuing with console logging")
        init_db()

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(meetings_router)
    app.include_router(action_items_router)
    app.include_router(share_router)
    app.include_router(stats_router)

    @app.exception_handler(ServiceError)
    async def _service_error_handler(request: Request, exc: ServiceError):  # type: ignore[override]
        logging.getLogger("recap.api").info("%s on %s: %s", exc.kind, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):  # type: ignore[override]
        logging.getLogger("recap").exception("Unhandled exception")
        return JSONResponse(status_code=500, content={"error": str(exc)})

    return app


app = create_app()


if __name__ == "__main__":
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Recap Backend Server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload (dev only)")

    args = parser.parse_args()

    uvicorn.run(
        "recap.main:app" if args.reload else app,
        host=args.host,
        port=args.port,
        reload=args.reload
    )

# main.py

import logging
import os
import signal
import sys

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import ConfigStore
from errors import ConfigError, WebhookError, http_error_body
from logging_config import LOG_FORMAT, setup_logging

# Routers
from routers.webhook import router as webhook_router

DEFAULT_CONFIG_PATH = "config.json"

logger = logging.getLogger(__name__)


def create_app(config_store: ConfigStore) -> FastAPI:
    app = FastAPI(
        title="gitea-webhook",
        description="Runs configured commands when Gitea reports a push",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None
    )
    app.state.config_store = config_store

    @app.exception_handler(WebhookError)
    async def webhook_error_handler(request: Request, exc: WebhookError):
        logger.warning(f"{exc.status_code}:{exc.message}")
        return PlainTextResponse(http_error_body(exc.status_code, exc.message), status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return PlainTextResponse(
            http_error_body(exc.status_code),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.middleware("http")
    async def recover_unexpected_errors(request: Request, call_next):
        # Anything not handled above ends as a 400; the process keeps serving.
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(f"Unhandled error while handling {request.method} {request.url.path}")
            return PlainTextResponse(http_error_body(400, f"panic: {e}"), status_code=400)

    app.include_router(webhook_router)
    return app


def install_reload_handler(config_store: ConfigStore):
    """
    Reload the configuration on SIGHUP. A failed reload keeps the previous configuration active.
    """
    def handle_sighup(signum, frame):
        logger.info("SIGHUP received, reloading configuration...")
        try:
            config_store.reload()
        except ConfigError:
            logger.exception(
                f"Configuration reload from '{config_store.source}' failed; still serving the previous configuration."
            )
            return
        logger.info("config reloaded")

    signal.signal(signal.SIGHUP, handle_sighup)
    return handle_sighup


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    config_path = argv[0] if argv else os.getenv("CONFIG_PATH", DEFAULT_CONFIG_PATH)

    config_store = ConfigStore()
    try:
        config = config_store.load(config_path)
    except ConfigError as e:
        # Logging isn't configured yet; report on stderr.
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error(f"Cannot start: {e}")
        sys.exit(1)

    try:
        setup_logging(config.logfile, debug=os.getenv("DEBUG_MODE", "").lower() == "true")
    except OSError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error(f"Cannot open log file '{config.logfile}': {e}")
        sys.exit(1)

    logger.info("Starting the gitea-webhook application...")
    app = create_app(config_store)
    install_reload_handler(config_store)

    logger.info(f"Listening on {config.address}:{config.port}")
    # uvicorn logs bind failures and exits non-zero on its own.
    uvicorn.run(app, host=config.address, port=config.port, log_config=None)


if __name__ == "__main__":
    main()

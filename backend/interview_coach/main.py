# backend/interview_coach/main.py
import logging
import resource
import time
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config, schemas
from .auth import build_verifier
from .errors import CoachError, safe_log
from .routes import feedback_routes
from .services.llm_service import build_gateway
from .store import build_store

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

_UNSET = object()

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}


def _memory_usage() -> dict:
    # ru_maxrss is kilobytes on Linux
    usage = resource.getrusage(resource.RUSAGE_SELF)
    return {"maxRssKb": usage.ru_maxrss}


def _internal_message(exc: Exception, fallback: str = "Internal server error") -> str:
    return str(exc) if config.is_development() else fallback


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CoachError)
    async def coach_error_handler(request: Request, exc: CoachError):
        if exc.status_code >= 500:
            safe_log(f"{request.method} {request.url.path} failed: {exc.message}", exc)
        body = {"error": exc.detail if exc.expose_detail else exc.message}
        if not exc.expose_detail:
            body["message"] = _internal_message(exc)
        body.update(exc.extra)
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        body = {"error": "Invalid request body"}
        if config.is_development():
            body["message"] = str(exc.errors())
        return JSONResponse(status_code=400, content=body)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        error = "Endpoint not found" if exc.status_code == 404 else exc.detail
        return JSONResponse(status_code=exc.status_code, content={"error": error})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        safe_log(f"Unhandled error on {request.method} {request.url.path}", exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": _internal_message(exc, "Something went wrong")},
        )


def create_app(model_gateway=_UNSET, verifier=_UNSET, store=_UNSET) -> FastAPI:
    """
    Build the API with its collaborators. Anything not passed in is constructed
    from environment configuration; pass None to run without a verifier or store.
    """
    app = FastAPI(title=config.APP_NAME, version=config.APP_VERSION)

    app.state.model_gateway = build_gateway() if model_gateway is _UNSET else model_gateway
    app.state.verifier = build_verifier() if verifier is _UNSET else verifier
    app.state.store = build_store() if store is _UNSET else store
    app.state.started_at = time.monotonic()

    # ----------------- CORS -----------------
    if config.is_development():
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=".*",
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def guard_and_log(request: Request, call_next):
        start_time = time.time()
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > config.MAX_BODY_BYTES:
            logger.warning("Rejected %s %s: body of %s bytes", request.method, request.url.path, content_length)
            return JSONResponse(status_code=413, content={"error": "Request body too large"})

        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)

        process_time = time.time() - start_time
        logger.info("%s %s -> %s in %.4fs", request.method, request.url.path, response.status_code, process_time)
        return response

    register_exception_handlers(app)
    app.include_router(feedback_routes.router)

    @app.get("/")
    def root():
        return {"message": config.APP_NAME, "version": config.APP_VERSION, "status": "running"}

    @app.get("/api/health", response_model=schemas.HealthOut)
    def health(request: Request):
        state = request.app.state
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - state.started_at, 3),
            "environment": config.ENVIRONMENT,
            "version": config.APP_VERSION,
            "memory": _memory_usage(),
            "services": {
                "model": bool(state.model_gateway is not None and state.model_gateway.configured),
                "identity": state.verifier is not None,
                "store": state.store is not None,
            },
        }

    logger.info("Environment: %s", config.ENVIRONMENT)
    logger.info("Model provider: %s", "configured" if app.state.model_gateway is not None and app.state.model_gateway.configured else "missing")
    logger.info("Identity verifier: %s", "configured" if app.state.verifier is not None else "missing")
    logger.info("Session store: %s", "configured" if app.state.store is not None else "missing")
    return app


app = create_app()

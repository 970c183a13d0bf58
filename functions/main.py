import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from functions.config import settings
from functions.core.errors import CallableError, Internal
from functions.core.limiter import limiter
from functions.database.firebase_client import create_firebase_clients
from functions.modules.accounts import routes as accounts_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(CallableError)
async def callable_error_handler(request: Request, exc: CallableError):
    return JSONResponse(status_code=exc.http_status, content=exc.to_payload())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        error = Internal("Internal server error")
    else:
        error = Internal("Internal server error", details={"error": str(exc)})
    return JSONResponse(status_code=error.http_status, content=error.to_payload())


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(accounts_routes.router)


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup (region=%s, app_check=%s)", settings.region, settings.enforce_app_check)
    app.state.firebase = create_firebase_clients()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": "Welcome to onebytwo-functions", "status": "healthy", "region": settings.region}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: Firebase clients are built during startup."""
    is_ready = getattr(app.state, "firebase", None) is not None
    return JSONResponse(
        status_code=200 if is_ready else 503,
        content={"status": "ready" if is_ready else "starting"},
    )


def run():
    """Console entry point: serve the callable with uvicorn."""
    uvicorn.run(
        "functions.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )

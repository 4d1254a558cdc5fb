# matchpledge/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from matchpledge.core.settings import settings
from matchpledge.errors import AppError

# -------------------------------------------------------------------
# Logging
# -------------------------------------------------------------------
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("matchpledge")

# -------------------------------------------------------------------
# FastAPI app setup
# -------------------------------------------------------------------
app = FastAPI(title="Peer-to-Peer Betting API", version="0.1")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)

# -------------------------------------------------------------------
# Core imports (after app is defined)
# -------------------------------------------------------------------
from matchpledge.core.db import create_schema
from matchpledge.storage import ensure_images_dir
from matchpledge.api import auth, games, pledges, posts, uploads

# -------------------------------------------------------------------
# Log every request
# -------------------------------------------------------------------
@app.middleware("http")
async def log_every_request(request: Request, call_next):
    logger.info("[REQ] %s %s", request.method, request.url.path)
    response = await call_next(request)
    logger.info("[RES] %s for %s %s", response.status_code, request.method, request.url.path)
    return response

# -------------------------------------------------------------------
# Error mapping: services raise, only this layer picks status + body
# -------------------------------------------------------------------
def _error_body(error: str, message: str) -> dict:
    return {"error": error, "message": message}


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message,
                     exc_info=exc)
        return JSONResponse(_error_body(exc.error, exc.error), status_code=exc.status_code)
    return JSONResponse(_error_body(exc.error, exc.message), status_code=exc.status_code)


@app.exception_handler(SQLAlchemyError)
async def handle_db_error(request: Request, exc: SQLAlchemyError):
    logger.error("database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(_error_body("Database error", "Database error"), status_code=500)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    logger.info("rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(_error_body("Invalid request", "Malformed request body or parameters"), status_code=400)

# -------------------------------------------------------------------
# Routers
# -------------------------------------------------------------------
app.include_router(auth.router)
app.include_router(pledges.router)
app.include_router(games.router)
app.include_router(posts.router)
app.include_router(uploads.router)

# -------------------------------------------------------------------
# Health check
# -------------------------------------------------------------------
@app.get("/", include_in_schema=False)
async def root():
    return PlainTextResponse("Peer-to-Peer Betting API")


@app.get("/health", include_in_schema=False)
async def health():
    return PlainTextResponse("ok")

# -------------------------------------------------------------------
# Startup
# -------------------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    try:
        ensure_images_dir()
    except OSError as exc:
        logger.warning("Failed to create uploads directory: %s", exc)
    # Only run DDL in environments that allow it (local/dev)
    if settings.RUN_DDL_ON_START:
        await create_schema()
    logger.info("startup complete env=%s", settings.ENV)

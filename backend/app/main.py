# app/main.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.db import init_db, close_db
from app.core.errors import AppError, Inconsistency, Unauthorized, ValidationError

from app.api.v1.routers import auth, assistants

logger = logging.getLogger("uvicorn.error")


def _error_response(exc: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.to_dict()},
        headers=headers,
    )


def _validation_fields(exc: RequestValidationError) -> list[dict]:
    """Flatten FastAPI/pydantic errors into [{"field", "message"}]."""
    fields = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        fields.append({"field": ".".join(loc) or "body", "message": err.get("msg", "Invalid value")})
    return fields


app = FastAPI(title=settings.APP_NAME)

# CORS (bearer tokens, no cookies)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, Inconsistency):
        # Details stay in the server log only
        logger.error("[error] %s %s -> inconsistency: %s", request.method, request.url.path, exc)
    elif exc.status_code >= 500:
        logger.error("[error] %s %s -> %s: %s", request.method, request.url.path, exc.code, exc)
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return _error_response(ValidationError(_validation_fields(exc)))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("[error] unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": {"code": "SERVER_ERROR", "message": "Server error"}},
    )


@app.on_event("startup")
async def on_startup():
    if settings.env != "dev" and settings.jwt_secret == "dev-secret":
        logger.warning("[config] JWT_SECRET is the development default; set a strong secret")
    if not settings.vapi_api_key:
        logger.warning("[config] VAPI_API_KEY not set; assistant create/update will fail")
    await init_db()


@app.on_event("shutdown")
async def on_shutdown():
    await close_db()


# REST
app.include_router(auth.router, prefix="/api/v1")
app.include_router(assistants.router, prefix="/api/v1")


@app.get("/healthz")
def healthz():
    return {"ok": True}

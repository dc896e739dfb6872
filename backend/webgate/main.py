import logging
import sys
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from webgate import __version__
from webgate.errors import AppError, Errors
from webgate.routers import ROUTERS
from webgate.configuration import get_settings
from webgate.database import init_db
from webgate.utils.ip_utils import get_client_ip

# All logs go to the terminal
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[logging.StreamHandler(sys.stdout)],
)

# Keep SQLAlchemy quiet
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)
settings = get_settings()

# Disable docs and OpenAPI schema in production
_is_prod = settings.ENVIRONMENT == "production"
docs_url = "/docs" if not _is_prod else None
redoc_url = "/redoc" if not _is_prod else None
openapi_url = "/openapi.json" if not _is_prod else None

app = FastAPI(
    title="webgate",
    version=__version__,
    docs_url=docs_url,
    redoc_url=redoc_url,
    openapi_url=openapi_url,
)


@app.on_event("startup")
async def startup_event():
    """Create missing tables on startup"""
    logger.info("Initializing webgate...")
    try:
        init_db()
    except Exception as e:
        logger.error(f"Startup error during DB init: {e}", exc_info=True)
        raise


# Global AppError handler
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """
    Global error handler for AppError exceptions.
    Provides the {success, message} envelope.
    """
    log = logger.error if exc.status >= 500 else logger.info
    log(
        f"AppError: code={exc.code} status={exc.status} path={request.url.path} "
        f"request_id={exc.request_id} details={exc.details}"
    )

    return JSONResponse(
        status_code=exc.status,
        content=exc.to_dict(is_production=_is_prod),
    )


# Sensitive field names that must NEVER appear in validation error responses
_SENSITIVE_FIELDS = frozenset(
    {
        "password",
        "token",
        "secret",
        "authorization",
    }
)


def _contains_sensitive_keys(value) -> bool:
    """Recursively detect whether a payload contains sensitive field names."""
    if isinstance(value, dict):
        return any(
            str(k).lower() in _SENSITIVE_FIELDS or _contains_sensitive_keys(v)
            for k, v in value.items()
        )
    if isinstance(value, list):
        return any(_contains_sensitive_keys(item) for item in value)
    return False


def _sanitize_validation_errors(errors) -> list:
    """
    Drop reflected inputs for sensitive fields and stringify ctx objects
    (ctx may hold exception instances that are not JSON serializable).
    """
    safe_details = []
    for err in errors:
        sanitized = {
            k: v for k, v in err.items() if k not in ("input", "ctx", "url")
        }
        if isinstance(err.get("ctx"), dict):
            sanitized["ctx"] = {ck: str(cv) for ck, cv in err["ctx"].items()}

        field_names = {str(loc).lower() for loc in err.get("loc", [])}
        inp = err.get("input")
        if (
            not field_names & _SENSITIVE_FIELDS
            and "body" not in field_names
            and not _contains_sensitive_keys(inp)
            and isinstance(inp, (str, int, float, bool, type(None)))
        ):
            sanitized["input"] = inp
        safe_details.append(sanitized)
    return safe_details


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and query parameters answer 400 with the envelope."""
    error = AppError(
        "VALIDATION_ERROR",
        400,
        "Invalid request",
        details=_sanitize_validation_errors(exc.errors()),
    )
    logger.warning(
        f"ValidationError: request_id={error.request_id} path={request.url.path} "
        f"errors={len(error.details)}"
    )
    return JSONResponse(status_code=400, content=error.to_dict(is_production=_is_prod))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Framework-level errors (405, malformed paths) in the same envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


# Catch-all for unhandled exceptions (prevent stack trace leaks)
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    error = Errors.internal(details=type(exc).__name__)
    logger.error(
        f"UnhandledException: request_id={error.request_id} path={request.url.path} "
        f"error={type(exc).__name__}: {exc}",
        exc_info=True,
    )
    return JSONResponse(status_code=500, content=error.to_dict(is_production=_is_prod))


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all requests and responses"""

    async def dispatch(self, request: Request, call_next) -> Response:
        client_ip = get_client_ip(request)
        logger.info(f">>> {request.method} {request.url.path} | IP: {client_ip}")

        try:
            response = await call_next(request)
            logger.info(
                f"<<< {request.method} {request.url.path} | Status: {response.status_code}"
            )
            return response
        except Exception as e:
            logger.error(f"!!! {request.method} {request.url.path} | Error: {str(e)}")
            raise


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses"""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # API answers and operator pages must not be cached
        if _is_api_path(request.url.path):
            response.headers["Cache-Control"] = "no-store"
        if settings.ENVIRONMENT == "production":
            response.headers["Strict-Transport-Security"] = (
                "max-age=63072000; includeSubDomains"
            )
        if "server" in response.headers:
            del response.headers["server"]
        return response


_API_PREFIXES = ("/api/", "/auth/", "/admin/", "/users", "/register", "/verify")


def _is_api_path(path: str) -> bool:
    return path.startswith(_API_PREFIXES)


class AuditLoggingMiddleware(BaseHTTPMiddleware):
    """Audit log for operator endpoints"""
    _AUDIT_PREFIXES = ("/admin/login", "/users", "/api/content")

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if not path.startswith(self._AUDIT_PREFIXES):
            return await call_next(request)

        client_ip = get_client_ip(request)
        audit_logger = logging.getLogger("audit")
        audit_logger.info(
            f"[AUDIT] {request.method} {path} | IP: {client_ip} | "
            f"Bearer: {'present' if request.headers.get('authorization') else 'absent'}"
        )

        response = await call_next(request)

        audit_logger.info(
            f"[AUDIT] {request.method} {path} | Status: {response.status_code}"
        )
        return response


# Security headers middleware (added first, executed last)
app.add_middleware(SecurityHeadersMiddleware)

# Audit logging middleware (before request logging to capture operator actions)
app.add_middleware(AuditLoggingMiddleware)

# Request logging middleware
app.add_middleware(RequestLoggingMiddleware)

_cors_origins = settings.ALLOWED_ORIGINS
allow_credentials = "*" not in _cors_origins and len(_cors_origins) > 0

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
)


@app.get("/health", include_in_schema=False)
async def health():
    return {"success": True, "status": "healthy"}


# Dispatch priority follows registration order; the static fallback is last
for _router in ROUTERS:
    app.include_router(_router)

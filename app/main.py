import logging
import time

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.config import settings
from app.core.exceptions import ServiceBusinessException
from app.core.logging_config import configure_logging
from app.core.messages import get_message, resolve_locale
from app.core.tenant import get_tenant_scope
from app.routes import (
    auth_routes,
    business_type_routes,
    customer_routes,
    order_routes,
    pricing_routes,
    template_routes,
    tenant_routes,
    user_routes,
)

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("app.main")

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,  # Disable in production
    redoc_url="/redoc" if settings.DEBUG else None,
)

# CORS middleware
cors_origins = settings.cors_origins_list
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "%s %s %s %.1fms",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - start) * 1000,
    )
    return response


def error_response(
    request: Request,
    status_code: int,
    code: str,
    detail=None,
    error: Exception | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """
    Uniform error body: success flag, localized message and stable code.

    The raw error is only exposed in development.
    """
    locale = resolve_locale(request.headers.get("Accept-Language"))
    content = {"success": False, "message": get_message(code, locale), "code": code}
    if detail is not None:
        content["detail"] = detail
    if error is not None and settings.is_development:
        content["error"] = str(error)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


# Exception handlers
@app.exception_handler(ServiceBusinessException)
async def service_exception_handler(request: Request, exc: ServiceBusinessException):
    headers = (
        {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    )
    return error_response(request, exc.status_code, exc.code, detail=exc.detail, headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    detail = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return error_response(request, status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", detail=detail)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return error_response(request, status.HTTP_409_CONFLICT, "CONFLICT", error=exc.orig)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "DATABASE_ERROR", error=exc
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", error=exc
    )


# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": settings.APP_VERSION}


# Root endpoint
@app.get("/")
async def root():
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs" if settings.DEBUG else "Documentation disabled in production",
    }


# Include routers
tenant_scoped = [Depends(get_tenant_scope)]
api = settings.API_PREFIX

app.include_router(
    auth_routes.router, prefix=f"{api}/auth", tags=["Auth"], dependencies=tenant_scoped
)
app.include_router(
    tenant_routes.router, prefix=f"{api}/tenants", tags=["Tenants"], dependencies=tenant_scoped
)
app.include_router(
    user_routes.router, prefix=f"{api}/users", tags=["Users"], dependencies=tenant_scoped
)
app.include_router(
    customer_routes.router,
    prefix=f"{api}/customers",
    tags=["Customers"],
    dependencies=tenant_scoped,
)
app.include_router(
    order_routes.router, prefix=f"{api}/orders", tags=["Orders"], dependencies=tenant_scoped
)
app.include_router(
    business_type_routes.router, prefix=f"{api}/business-types", tags=["Business Types"]
)
app.include_router(
    template_routes.product_router, prefix=f"{api}/product-templates", tags=["Product Templates"]
)
app.include_router(
    template_routes.service_router, prefix=f"{api}/service-templates", tags=["Service Templates"]
)
app.include_router(pricing_routes.router, prefix=f"{api}/pricing", tags=["Pricing"])

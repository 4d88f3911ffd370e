# main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.encoders import jsonable_encoder
from fastapi import Request
import json
import logging

# import your routers and db init
from isoyard.routers import (
    auth_router, users_router, zones_router, inventory_router,
    registry_router, logs_router, dashboard_router,
)
from isoyard.database import init_db


# Initialize database
init_db()

app = FastAPI(title="ISO Tank Yard API", version="1.0.0", description="ISO tank yard gate and zone management API")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router.router)
app.include_router(users_router.router)
app.include_router(zones_router.router)
app.include_router(inventory_router.router)
app.include_router(registry_router.router)
app.include_router(logs_router.router)
app.include_router(dashboard_router.router)

logger = logging.getLogger("uvicorn.error")


# Uniform response middleware: wrap JSON responses in the required envelope
class UniformResponseMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)

            # Don't wrap docs or openapi
            path = request.url.path
            if path.startswith("/docs") or path.startswith("/redoc") or path.startswith("/openapi"):
                return response

            # CSV / Excel downloads pass through untouched
            content_type = response.headers.get("content-type", "")
            if "application/json" not in content_type:
                return response

            body_bytes = b"".join([chunk async for chunk in response.body_iterator])
            passthrough = Response(content=body_bytes, status_code=response.status_code, headers=dict(response.headers))

            try:
                body = json.loads(body_bytes.decode()) if body_bytes else None
            except ValueError:
                # If we can't parse it, return original response
                return passthrough

            # If already in uniform format, return as-is
            if isinstance(body, dict) and set(("success", "message", "data")).issubset(body.keys()):
                return passthrough

            ok = response.status_code < 400
            wrapped = {
                "success": ok,
                "message": "Operation successful" if ok else "Error",
                "data": body if body is not None else {},
            }
            return JSONResponse(content=wrapped, status_code=response.status_code)

        except Exception:
            logger.exception("Error in UniformResponseMiddleware")
            return JSONResponse(content={"success": False, "message": "Internal server error", "data": {}}, status_code=500)


# attach middleware
app.add_middleware(UniformResponseMiddleware)


# Exception handlers to return uniform error shape
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # exc.detail may be dict or str
    msg = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(content={"success": False, "message": msg or "Error", "data": {}},
                        status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", []) if p != "body")
    msg = f"Invalid {field}: {first.get('msg')}" if field else "Invalid request"
    return JSONResponse(content={"success": False, "message": msg, "data": {"errors": errors}}, status_code=422)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(content={"success": False, "message": "Internal server error", "data": {}}, status_code=500)


@app.get("/")
def root():
    return {"message": "ISO Tank Yard API is running"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}


PUBLIC_PATHS = ("/", "/health", "/api/auth/login")
BEARER = {"BearerAuth": []}


def bearer_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    schema = get_openapi(title=app.title, version=app.version, routes=app.routes)
    schemes = schema.setdefault("components", {}).setdefault("securitySchemes", {})
    schemes["BearerAuth"] = {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}

    for path, operations in schema.get("paths", {}).items():
        if path in PUBLIC_PATHS:
            continue
        for operation in operations.values():
            operation["security"] = [BEARER]

    app.openapi_schema = schema
    return schema


app.openapi = bearer_openapi

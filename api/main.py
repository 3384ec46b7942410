"""
Travel Booking API - Main Application
======================================

LAYERED ARCHITECTURE:
- FastAPI routers in /api/v1/endpoints (controllers)
- Business logic in root services.py (with read-through cache)
- Data access in root repositories.py, models in root database.py

Run with: python -m uvicorn api.main:app --reload --port 8000
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from database import init_db
from exceptions import ApplicationError
from logging_config import get_logger

# Import routers
from api.v1.endpoints import admin, auth, bookings, cities, hotels, reviews, rooms

logger = get_logger(__name__)


# ==========================================
# APP CONFIGURATION
# ==========================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.project_name} started ({settings.environment})")
    yield


app = FastAPI(
    title=settings.project_name,
    version=settings.api_version,
    description="""
## Travel Accommodation Booking API

REST API for browsing cities, hotels and rooms, booking stays and leaving reviews.

### Architecture
- **Controllers**: FastAPI routers under `/api/v1`
- **Services**: business rules, read-through in-memory cache cleared on every write
- **Repositories**: SQLAlchemy data access

### Security
- JWT bearer tokens (`Authorization: Bearer <token>`), revocable via logout
- Roles: `User` and `Admin`
- Email verification and password reset with one-time passcodes

### Concurrency
- `ETag` on reads, `If-None-Match` returns 304
- `If-Match` required on PATCH for users, hotels, rooms, bookings and reviews
""",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# ==========================================
# MIDDLEWARE
# ==========================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["ETag", "Location"],
)


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "X-XSS-Protection": "1; mode=block",
}


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


# ==========================================
# ERROR HANDLERS
# ==========================================

def register_error_handlers(app: FastAPI) -> None:
    """Map domain exceptions to ``{"message", "details"}`` JSON bodies."""

    @app.exception_handler(ApplicationError)
    async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message, "details": exc.details},
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path} rejected: invalid request data")
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request data", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"message": "An unexpected error occurred", "details": {}},
        )


register_error_handlers(app)


# ==========================================
# ROUTERS
# ==========================================

app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(admin.router, prefix="/api/v1/admin", tags=["Admin"])
app.include_router(cities.router, prefix="/api/v1/cities", tags=["Cities"])
app.include_router(hotels.router, prefix="/api/v1/hotels", tags=["Hotels"])
app.include_router(rooms.router, prefix="/api/v1/rooms", tags=["Rooms"])
app.include_router(bookings.router, prefix="/api/v1/bookings", tags=["Bookings"])
app.include_router(reviews.router, prefix="/api/v1/reviews", tags=["Reviews"])


# ==========================================
# HEALTH ENDPOINTS
# ==========================================

@app.get("/", tags=["Health"])
def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "api": settings.project_name,
        "version": settings.api_version,
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "database": settings.database_url.split("://", 1)[0],
        "cors_origins": settings.cors_origins,
    }

"""
FastAPI application entry point.

INGRES Groundwater API - groundwater resource assessments for Indian
states, districts and blocks, with region comparison, critical-unit
listing, exports and a free-text chat interface.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from ingres.config import settings, ensure_directories
from ingres.database import init_db
from ingres.exceptions import GroundwaterError
from ingres.schemas import HealthResponse
from ingres.routers import assessments, comparison, export, chat, ai
from ingres.services.query_orchestrator import error_body, error_status
from ingres.utils.constants import ROLE_CAPABILITIES

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="""
    💧 **INGRES Groundwater API**

    Groundwater resource assessments for India's states, districts and blocks.

    ## Key Features

    * **Current Assessment**: Latest assessment of every region
    * **Historical Data**: Monthly readings with optional yearly averages
    * **Region Comparison**: Year-aligned comparison of several regions
    * **Critical Units**: Over-exploited, critical and semi-critical regions
    * **Exports**: CSV, JSON and Excel-ready JSON datasets
    * **Chat**: Free-text questions answered from the database, optionally
      explained by a text-generation model

    ## Errors

    Every error response has the shape `{"error": "...", "code": "..."}`.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error handlers
@app.exception_handler(GroundwaterError)
async def groundwater_error_handler(request: Request, exc: GroundwaterError):
    status = error_status(exc)
    if status >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    return JSONResponse(status_code=status, content=error_body(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "code": "INVALID_REQUEST"}
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "code": code}
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "code": "INTERNAL_ERROR"}
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    ensure_directories()

    try:
        init_db()
        logger.info("Database initialized (%s)", "postgres" if settings.is_postgres else "sqlite")
    except Exception as e:
        logger.warning("Database initialization warning: %s", e)


# Include routers with prefixes
app.include_router(
    assessments.router,
    prefix=f"{settings.API_PREFIX}/groundwater",
    tags=["Assessments"]
)
app.include_router(
    comparison.router,
    prefix=f"{settings.API_PREFIX}/groundwater",
    tags=["Comparison & Critical Units"]
)
app.include_router(
    export.router,
    prefix=f"{settings.API_PREFIX}/groundwater",
    tags=["Export"]
)
app.include_router(
    chat.router,
    prefix=f"{settings.API_PREFIX}/groundwater",
    tags=["Chat"]
)
app.include_router(
    ai.router,
    prefix=f"{settings.API_PREFIX}/ai",
    tags=["Text Generation"]
)


# Root endpoint
@app.get("/", tags=["Root"])
def root():
    """API root endpoint with basic information."""
    groundwater = f"{settings.API_PREFIX}/groundwater"
    return {
        "message": "💧 INGRES Groundwater API",
        "version": settings.VERSION,
        "description": "Groundwater resource assessments for Indian regions",
        "docs": "/docs",
        "redoc": "/redoc",
        "text_generation": "enabled" if settings.generation_enabled else "disabled",
        "endpoints": {
            "current_assessment": f"{groundwater}/current-assessment",
            "historical_data": f"{groundwater}/historical-data",
            "compare_regions": f"{groundwater}/compare-regions",
            "critical_units": f"{groundwater}/critical-units",
            "export": f"{groundwater}/export",
            "simple_export": f"{groundwater}/simple-export",
            "chat_query": f"{groundwater}/chat-query",
            "ai": f"{settings.API_PREFIX}/ai",
        }
    }


# Health check
@app.get(f"{settings.API_PREFIX}/health", tags=["Health"], response_model=HealthResponse)
def health_check():
    """Health check endpoint."""
    from ingres.database import engine
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    # Check database connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        db_status = f"unhealthy: {str(e)}"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "version": settings.VERSION,
        "database": db_status
    }


# Role capabilities
@app.get(f"{settings.API_PREFIX}/roles", tags=["Metadata"])
def get_roles():
    """
    Capabilities granted to each user role.

    Roles are a fixed set; they are documented here for API consumers and
    are not stored.
    """
    return {
        "roles": {
            role: sorted(capabilities)
            for role, capabilities in ROLE_CAPABILITIES.items()
        }
    }

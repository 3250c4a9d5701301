import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import BoundaryError, MissingInputError
from app.services.data_loader import CareerDataService

# IMPORT ROUTERS
from app.routers.careers import router as careers_router
from app.routers.game import router as game_router
from app.routers.health import router as health_router
from app.routers.records import router as records_router

load_dotenv()

logger = logging.getLogger(__name__)

# FASTAPI APPLICATION CONFIGURATION
app = FastAPI(
    title=settings.APP_NAME,
    description="""
# Career Salary Game API

Backend for the "which career pays more?" classroom game.

| Endpoint | Method | Description |
|----------|--------|-------------|
| `/api/scrape-career` | POST | Read a custom career from a BLS handbook page |
| `/api/save-record` | POST | Save a student's score |
| `/api/health` | GET | Health check |
| `/api/careers` | GET | Filtered career list |
| `/api/careers/search` | GET | Search careers |
| `/api/careers/{id}/similar` | GET | Similar careers |
| `/api/matchups` | GET | Balanced matchups |

Errors are returned as `{"error": message}`.

The career dataset is built offline with `python -m app.pipelines.runner`.
    """,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Replaced by tests with a service pointed at fixture data
app.state.career_service = CareerDataService()


# REGISTER EXCEPTION HANDLERS
@app.exception_handler(BoundaryError)
async def boundary_error_handler(request: Request, exc: BoundaryError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


# ROOT ENDPOINT
@app.get("/", tags=["Root"], summary="Root endpoint")
async def root():
    """Root endpoint that returns API information."""
    return {
        "message": f"Welcome to the {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "careers_loaded": app.state.career_service.is_loaded,
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
    }


# REGISTER ROUTERS
app.include_router(careers_router)   # Custom career scraping
app.include_router(records_router)   # Student records
app.include_router(health_router)    # Health check
app.include_router(game_router)      # Career pool and matchups


# STARTUP & SHUTDOWN EVENTS
@app.on_event("startup")
async def startup_event():
    """Load the game dataset; the API still starts without it."""
    service: CareerDataService = app.state.career_service
    try:
        await service.load()
    except MissingInputError as e:
        logger.warning(f"⚠️ {e}. Game endpoints will answer 503 until the dataset is built.")

    print("\n" + "="*60)
    print(f"  {settings.APP_NAME}")
    print("="*60)
    print("\n📚 Documentation:")
    print("   Swagger UI: http://localhost:8000/docs")
    print("\n📋 Endpoints:")
    print("   POST /api/scrape-career   - Scrape BLS.gov career data")
    print("   POST /api/save-record     - Save a student record")
    print("   GET  /api/health          - Health check")
    print("   GET  /api/careers         - Career list")
    print("   GET  /api/matchups        - Balanced matchups")
    print(f"\n   Careers loaded: {len(service.get_careers()) if service.is_loaded else 0}")
    print("\n" + "="*60 + "\n")


@app.on_event("shutdown")
async def shutdown_event():
    """Runs when the application shuts down."""
    print(f"\nShutting down {settings.APP_NAME}...")


# RUN WITH UVICORN
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )

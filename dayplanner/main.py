import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .auth import ensure_default_owner
from .config import DATABASE_URL, DEFAULT_OWNER_ID, SEED_DEFAULT_CATEGORIES, configure_logging
from .database import Base, make_engine, make_session_factory, session_scope
from .errors import SchedulingError
from .models import Category
from .routes import categories, activities, sessions, analytics, planner
from .seed import seed_default_categories
from .services.day_locks import DayLockRegistry

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI):
    @app.exception_handler(SchedulingError)
    async def scheduling_error_handler(request: Request, exc: SchedulingError):
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "validation_failed", "detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "internal_error", "detail": str(exc)})


def create_app(database_url: Optional[str] = None, seed: Optional[bool] = None) -> FastAPI:
    """
    Build the API around its own database handle.

    Tests pass "sqlite://" for an isolated in-memory database per app.
    """
    configure_logging()

    engine = make_engine(database_url or DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    session_factory = make_session_factory(engine)

    should_seed = SEED_DEFAULT_CATEGORIES if seed is None else seed
    with session_scope(session_factory) as db:
        ensure_default_owner(db)
        if should_seed:
            seed_default_categories(db, DEFAULT_OWNER_ID)

    app = FastAPI(
        title="Daily Activity Planner API",
        description="Categories, activities and 30-minute-aligned sessions on a day grid, with simple analytics",
        version="1.0.0",
    )
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.day_locks = DayLockRegistry()

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    register_error_handlers(app)

    # Include routers
    app.include_router(categories.router, prefix="/api/categories", tags=["categories"])
    app.include_router(activities.router, prefix="/api/activities", tags=["activities"])
    app.include_router(sessions.router, prefix="/api/sessions", tags=["sessions"])
    app.include_router(analytics.router, prefix="/api/analytics", tags=["analytics"])
    app.include_router(planner.router, prefix="/api/planner", tags=["planner"])

    @app.get("/")
    def read_root():
        """Root endpoint with API information"""
        return {
            "message": "Welcome to the Daily Activity Planner API",
            "version": "1.0.0",
            "endpoints": {
                "categories": "CRUD /api/categories",
                "activities": "CRUD /api/activities",
                "sessions": "CRUD /api/sessions - list with ?date= or ?startDate=&endDate=",
                "grid": "GET /api/planner/grid?date=YYYY-MM-DD - 48-slot occupancy map",
                "analytics": "GET /api/analytics/{activity-hours,category-hours,daily-stats,summary}",
            },
            "swagger_ui": "/docs - Interactive API documentation",
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {"status": "ok", "message": "Daily Activity Planner API is running"}

    @app.get("/api/test-db")
    def test_db():
        """Check the database connection"""
        with session_scope(app.state.session_factory) as db:
            count = db.query(Category).count()
        return {"status": "ok", "message": "Database connected successfully", "categoryCount": count}

    logger.info(f"Daily Activity Planner API ready on {engine.url}")
    return app


# Run with: uvicorn dayplanner.main:create_app --factory
if __name__ == "__main__":
    import uvicorn
    print("🚀 Starting Daily Activity Planner API...")
    print("📖 API Documentation: http://localhost:8000/docs")
    print("🔍 Health Check: http://localhost:8000/health")
    uvicorn.run("dayplanner.main:create_app", factory=True, host="0.0.0.0", port=8000, reload=True)

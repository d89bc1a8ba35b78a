import logging
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from streamcms.config import settings
from streamcms import database
from streamcms.exception_handlers import register_exception_handlers
from streamcms.middleware.logging import StructuredLoggingMiddleware, setup_structured_logging
from streamcms.routes import auth, categories, comments, dashboard, movies, pages, site, uploads, views

setup_structured_logging(log_level=settings.log_level, json_format=settings.json_logs)
logger = logging.getLogger("streamcms")


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Movie catalog and streaming site with live view counts",
        debug=settings.debug,
        version=settings.app_version,
    )

    app.add_middleware(StructuredLoggingMiddleware)
    register_exception_handlers(app)

    # Include routers
    app.include_router(auth.router, prefix="/auth", tags=["Auth"])
    app.include_router(movies.router, prefix="/api/movies")
    app.include_router(categories.router, prefix="/api/categories")
    app.include_router(comments.router, prefix="/api/comments")
    app.include_router(uploads.router, prefix="/api/upload")
    app.include_router(dashboard.router, prefix="/api/admin")
    app.include_router(views.router)
    app.include_router(site.router)
    app.include_router(pages.router)

    # Uploaded posters are served from the same origin as the pages
    poster_dir = Path(settings.poster_upload_dir)
    poster_dir.mkdir(parents=True, exist_ok=True)
    app.mount(settings.poster_public_path, StaticFiles(directory=str(poster_dir)), name="posters")

    if settings.debug:
        logger.info(f"Running in {settings.environment} mode")
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    @app.on_event("startup")
    async def startup_event():
        logger.info("Starting up the application...")
        if settings.debug:
            async with database.engine.begin() as conn:
                await conn.run_sync(database.Base.metadata.create_all)
            logger.info("Database tables created (if not existing).")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down the application...")
        await database.engine.dispose()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)

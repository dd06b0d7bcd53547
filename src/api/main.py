"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import health_router, status_router
from core.config import API_DEBUG, API_VERSION, load_settings
from core.logging_setup import configure_logging
from services.indicator import MeetingIndicator


def create_app(indicator: MeetingIndicator | None = None) -> FastAPI:
    """Build the API; the indicator is created from the environment at startup if not given."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Start the indicator on startup, run its shutdown hook on exit."""
        if indicator is None:
            configure_logging()
            app.state.indicator = MeetingIndicator.from_settings(load_settings())
        else:
            app.state.indicator = indicator

        app.state.indicator.start()

        yield

        await app.state.indicator.shutdown()

    app = FastAPI(
        title="Meeting Indicator API",
        description="Current meeting status of the Outlook calendar driving the desk display",
        version=API_VERSION,
        debug=API_DEBUG,
        lifespan=lifespan,
    )

    # CORS middleware (for development)
    if API_DEBUG:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Global exception handler for unexpected errors
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions with standard error format."""
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Internal server error",
                code=ErrorCodes.INTERNAL_ERROR,
                details=[],
            ).model_dump(),
        )

    app.include_router(health_router)
    app.include_router(status_router)
    return app


app = create_app()


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )

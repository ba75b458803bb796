from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from boardeasy.auth.router import router as auth_router
from boardeasy.bookings.registry import WorkflowRegistry
from boardeasy.bookings.router import router as bookings_router
from boardeasy.cities.router import router as cities_router
from boardeasy.config import Settings, configure_logging, settings


def create_app(
    config: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    config = config or settings
    configure_logging(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.registry.close()

    app = FastAPI(
        title=config.PROJECT_NAME,
        version="1.0.0",
        description="BoardEasy bus booking workflow API",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.registry = WorkflowRegistry(config, transport)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(
        auth_router,
        prefix=f"{config.API_V1_STR}/auth",
        tags=["Authentication"]
    )

    app.include_router(
        cities_router,
        prefix=f"{config.API_V1_STR}/cities",
        tags=["City Autocomplete"]
    )

    app.include_router(
        bookings_router,
        prefix=f"{config.API_V1_STR}/booking",
        tags=["Booking Workflow"]
    )

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "message": config.PROJECT_NAME,
            "version": "1.0.0",
            "docs": "/docs"
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {"status": "healthy"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

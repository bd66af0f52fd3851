"""Main FastAPI application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from social_os import __version__
from social_os.api.endpoints import router
from social_os.api.timeline import router as timeline_router
from social_os.utils.logging import setup_logging

setup_logging()

# Create FastAPI application
app = FastAPI(
    title="Social OS",
    description=(
        "A social timeline where every user has a personal AI agent that helps "
        "write posts, suggest ideas and prepare image prompts."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {
            "name": "Conversation",
            "description": "Chat with a user's personal agent. Client-side actions pause the turn.",
        },
        {
            "name": "Timeline",
            "description": "Users, their agent profiles and posts.",
        },
        {
            "name": "Health",
            "description": "Service health monitoring and status checks.",
        },
    ],
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Demo only; no authentication
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
app.include_router(timeline_router)


def main() -> None:
    """Run the API server."""
    import uvicorn

    uvicorn.run("social_os.main:app", host="0.0.0.0", port=8000, log_level="info")


if __name__ == "__main__":
    main()

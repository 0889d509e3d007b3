"""
FastAPI main application
"""
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from risklens import __version__
from risklens.api import routes
from risklens.config import get_settings
from risklens.utils.logger import setup_logging, get_logger

settings = get_settings()
setup_logging(environment=settings.environment, log_dir=settings.log_dir, app_name=settings.app_name)
logger = get_logger(__name__)

# @traceable reads the LangSmith variables from the environment
if settings.langsmith_tracing and settings.langsmith_api_key:
    os.environ["LANGSMITH_TRACING"] = "true"
    os.environ["LANGSMITH_API_KEY"] = settings.langsmith_api_key
    os.environ["LANGSMITH_PROJECT"] = settings.langsmith_project
else:
    os.environ["LANGSMITH_TRACING"] = "false"

app = FastAPI(
    title="RiskLens",
    description="Risk register analytics API",
    version=__version__,
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(routes.router, prefix="/api")

logger.info(f"🚀 RiskLens API ready (environment={settings.environment})")


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"status": "ok", "service": "risklens", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("risklens.main:app", host="0.0.0.0", port=8000, reload=settings.debug)

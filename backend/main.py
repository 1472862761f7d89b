"""
CSAT Exam Catalog Backend - server entry point

    python main.py
    uvicorn main:app --port 3001
"""

from csat_catalog.app import create_app
from csat_catalog.config.settings import configure_logging, settings

configure_logging(settings)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )

from fastapi import FastAPI
import logging

from fraud_service.api.endpoints import router
from fraud_service.config import Config
from fraud_service.history.store import PredictionHistory

# Configure logging
logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(history: PredictionHistory = None) -> FastAPI:
    """Build the API application with its own prediction history"""
    app = FastAPI(
        title=Config.API_TITLE,
        description=Config.API_DESCRIPTION,
        version=Config.API_VERSION,
    )
    if history is None:
        history = PredictionHistory(max_entries=Config.MAX_HISTORY_ENTRIES)
    app.state.history = history
    app.include_router(router)

    logger.info("Fraud detection service ready")
    return app


app = create_app()


def run():
    import uvicorn
    uvicorn.run(app, host=Config.API_HOST, port=Config.API_PORT)


if __name__ == "__main__":
    run()

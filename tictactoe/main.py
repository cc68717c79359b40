from fastapi import FastAPI
import logging

from tictactoe.api.routes import router
from tictactoe.runtime import get_session_service, init_service
from tictactoe.settings import settings_from_env

settings = settings_from_env()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="tictactoe", version="0.1.0")
app.include_router(router)


@app.on_event("startup")
async def _startup() -> None:
    init_service(settings=settings)
    logger.info("Session service ready (create_on_subscribe=%s)", settings.create_on_subscribe)


@app.on_event("shutdown")
async def _shutdown() -> None:
    # Ends every open event stream so clients reconnect to the next process.
    get_session_service().close()


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "tictactoe", "version": "0.1.0"}

# pokedex/main.py
import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .catalog import catalog_router
from .catalog import router as catalog_routes


logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def _report_startup_fetch(task: asyncio.Task) -> None:
    if not task.cancelled() and task.exception() is not None:
        logger.error("Startup catalog fetch crashed", exc_info=task.exception())


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Kick off the first fetch without holding up startup; the view
    # reports "loading" until it lands.
    task = asyncio.create_task(catalog_routes.catalog_state.refresh())
    task.add_done_callback(_report_startup_fetch)
    logger.info("Catalog fetch scheduled")
    yield
    task.cancel()


app = FastAPI(
    title="Pokedex Tracker",
    description=(
        "Browse the PokeAPI catalog, mark Pokemon as owned and share "
        "the selection as a compact link."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(catalog_router)


# Base route for quick checks
@app.get("/")
def health_check():
    return {"status": "ok", "message": "Pokedex tracker live"}

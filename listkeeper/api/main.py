import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from listkeeper import __version__
from listkeeper.adapters.sqlite.migrator import SQLiteMigrator
from listkeeper.api.deps import get_rules, get_settings
from listkeeper.api.routes import lists, runs

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load rules and bring the schema up to date (fail-fast)."""
    rules = get_rules(get_settings())
    SQLiteMigrator(str(rules.store.db_path)).run_migrations()
    logger.info("Rules loaded from %s", get_settings().rules_path)
    yield


app = FastAPI(
    title="listkeeper admin API",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(lists.router, prefix="/api/lists", tags=["Mailing lists"])
app.include_router(runs.router, prefix="/api/runs", tags=["Reconciliation"])


@app.get("/health")
def health_check() -> dict[str, Any]:
    return {"status": "ok", "version": __version__}

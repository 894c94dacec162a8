"""FastAPI application wiring."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from cftranscoder import FragmentsClient, TranscodeContext
from cftranscoder.utils.logging_config import configure_logging, get_logger
from server.routers import pages

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    context = TranscodeContext.from_config()
    app.state.context = context
    async with FragmentsClient(context) as client:
        app.state.fragments_client = client
        logger.info("Serving fragments", extra={"author_base": context.author_base})
        yield


app = FastAPI(title="cftranscoder", lifespan=lifespan)
app.include_router(pages.router)

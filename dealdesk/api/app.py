"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dealdesk.api.routes import deals, payments
from dealdesk.config import settings
from dealdesk.engine.errors import DealEngineError

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Dealdesk",
    description="Deal calculation and lender eligibility engine",
    version="0.1.0",
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(deals.router)
app.include_router(payments.router)


@app.exception_handler(DealEngineError)
async def deal_engine_error(request: Request, exc: DealEngineError):
    logger.warning("Deal engine rejected %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


@app.get("/health")
async def health():
    return {"status": "ok"}

# schedule_service/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from schedule_service.api.v1.api import api_router

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Schedule service starting up...")
    yield
    logger.info("Schedule service shutting down...")


app = FastAPI(
    title="Schedule Service",
    version="1.0.0",
    description="""
        Academic schedule service.

        Expands recurring class schedules into dated attendance sessions
        for each school (tenant).

        ## Authentication

        Endpoints require JWT authentication via the `Authorization: Bearer <token>` header.
        """,
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"message": "Schedule Service is running"}

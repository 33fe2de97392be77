import logging
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError

from app import config
from app.api.routes import router
from app.db.session import engine
from app.db.models import Base

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="EA Relationship Graph",
    version="0.1.0",
)

# Middleware FIRST
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes AFTER middleware
app.include_router(router)


@app.on_event("startup")
def startup():
    retries = 5
    delay = 2

    for attempt in range(retries):
        try:
            Base.metadata.create_all(bind=engine)
            logger.info("[Startup] Database connected")
            return
        except OperationalError:
            logger.info("[Startup] Waiting for database... (%d/%d)", attempt + 1, retries)
            time.sleep(delay)

    # Classification and /layout still work without the store
    logger.warning("[Startup] Database not ready, running without persistence")

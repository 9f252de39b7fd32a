# barberqueue/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from barberqueue.config import LOG_LEVEL
from barberqueue.db import init_db
from barberqueue.errors import InvalidInput, QueueError
from barberqueue.routers import (
    appointments_routes,
    auth_routes,
    barbers_routes,
    shops_routes,
    users_routes,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("passlib").setLevel(logging.ERROR)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    init_db()
    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Barber Queue API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(QueueError)
async def queue_error_handler(request: Request, exc: QueueError):
    """Render domain errors as {"error": code, "detail": message}."""
    logger.warning(f"{request.method} {request.url.path}: {exc.code} ({exc.detail})")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "detail": exc.detail},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed bodies and parameters with the same shape as InvalidInput."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return await queue_error_handler(request, InvalidInput(problems))


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(auth_routes.router)
app.include_router(users_routes.router)
app.include_router(shops_routes.router)
app.include_router(barbers_routes.router)
app.include_router(appointments_routes.router)

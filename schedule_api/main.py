import logging

logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
)

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from schedule_api.config import get_settings
from schedule_api.controllers.dates import router as dates_router
from schedule_api.controllers.events import router as events_router
from schedule_api.controllers.health import router as health_router
from schedule_api.errors import register_exception_handlers
from schedule_api.lifespan import lifespan
from schedule_api.middleware import HTTPLogMiddleware

settings = get_settings()

app = FastAPI(title="Schedule Coordination API", version="1.0.0", lifespan=lifespan)
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Origin", "Content-Type", "Authorization"],
)

if settings.debug.request:
    logging.getLogger("schedule_api.http").setLevel(logging.DEBUG)
    app.add_middleware(HTTPLogMiddleware)

if settings.features.metrics:
    Instrumentator().instrument(app).expose(app, include_in_schema=False)

app.include_router(health_router)
app.include_router(events_router, prefix="/api")
app.include_router(dates_router, prefix="/api")


def run() -> None:
    uvicorn.run("schedule_api.main:app", host=settings.server.host, port=settings.server.port)


if __name__ == "__main__":
    run()

# kore_dibo/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kore_dibo.api.v1.endpoints import (
    answers,
    assignments,
    auth,
    bids,
    doubts,
    health,
    helpers,
    messages,
    notifications,
    reviews,
    users,
)
from kore_dibo.core.config import settings
from kore_dibo.core.errors import register_exception_handlers
from kore_dibo.core.logging_config import setup_logging
from kore_dibo.db.init_db import init_db

setup_logging()

app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.on_event("startup")
def on_startup():
    init_db()


for module in (
    auth,
    users,
    assignments,
    bids,
    helpers,
    messages,
    reviews,
    doubts,
    answers,
    notifications,
    health,
):
    app.include_router(module.router, prefix=settings.API_PREFIX)

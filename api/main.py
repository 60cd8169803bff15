from contextlib import asynccontextmanager

from fastapi import FastAPI

from core import db
from core.db import Database
from leagues import router as leagues_router
from news import router as news_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool per process, owned here and handed to routes via app.state.
    database = Database(db.database_url())
    await database.open()
    app.state.db = database
    try:
        yield
    finally:
        if database.is_open:
            await database.close()


app = FastAPI(lifespan=lifespan)

app.include_router(news_router.router, tags=["news"])
app.include_router(leagues_router.router, tags=["leagues"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def index() -> list[dict]:
    return [
        {"href": "/news", "methods": ["GET", "POST"]},
        {"href": "/news/{id}", "methods": ["GET", "DELETE"]},
        {"href": "/leagues", "methods": ["GET"]},
        {"href": "/leagues/{id}", "methods": ["GET"]},
        {"href": "/leagues/{id}/news", "methods": ["GET"]},
    ]

# forum/main.py
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from forum.config import settings
from forum.core.bootstrap import ensure_default_admin
from forum.core.db import init_db, close_db
from forum.core.errors import register_exception_handlers

from forum.api.routers import auth, questions, answers, comments, notifications, tags

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

register_exception_handlers(app)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def on_startup():
    # Refuse to serve without a token signing secret
    settings.require_jwt_secret()
    await init_db()
    # Ensure there's a default admin account on first run
    await ensure_default_admin()
    logger.info("[startup] %s ready (env=%s)", settings.APP_NAME, settings.env)

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

# REST; everything except /api/auth is behind the session gate
app.include_router(auth.router, prefix="/api")
app.include_router(questions.router, prefix="/api")
app.include_router(answers.router, prefix="/api")
app.include_router(comments.router, prefix="/api")
app.include_router(notifications.router, prefix="/api")
app.include_router(tags.router, prefix="/api")

@app.get("/")
def root():
    return {"ok": True, "name": settings.APP_NAME}

@app.get("/healthz")
def healthz():
    return {"ok": True}

def run() -> None:
    uvicorn.run("forum.main:app", host=settings.host, port=settings.port)

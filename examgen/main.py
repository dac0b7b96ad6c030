"""
AI Test Generator API: Main Application
FastAPI application that turns study notes into stored exam question sets.
Manages accounts, roles, Gemini-backed test generation and admin moderation.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from examgen import __version__, config
from examgen.auth.security import hash_password
from examgen.database import crud
from examgen.database.database import Base, SessionLocal, engine
from examgen.database.models import UserRole
from examgen.generation.gemini_client import build_gemini_client
from examgen.generation.question_generator import QuestionGenerator
from examgen.routers import admin, auth, tests, users

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s  %(levelname)s  %(message)s")
log = logging.getLogger("examgen")


def _seed_defaults():
    """Create the default admin account if one is configured and missing."""
    if not config.DEFAULT_ADMIN_EMAIL or not config.DEFAULT_ADMIN_PASSWORD:
        return
    db = SessionLocal()
    try:
        if crud.get_user_by_email(db, config.DEFAULT_ADMIN_EMAIL) is None:
            crud.create_user(
                db,
                email=config.DEFAULT_ADMIN_EMAIL,
                hashed_password=hash_password(config.DEFAULT_ADMIN_PASSWORD),
                name="Admin",
                role=UserRole.ADMIN.value,
            )
            log.info(f"✓ Default admin created: {config.DEFAULT_ADMIN_EMAIL.lower()}")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: create tables, seed the admin, build the Gemini client."""
    Base.metadata.create_all(bind=engine)
    _seed_defaults()

    client = None
    app.state.question_generator = None
    if config.GEMINI_API_KEY:
        client = build_gemini_client(config.GEMINI_API_KEY)
        app.state.question_generator = QuestionGenerator(client, models=config.GEMINI_MODELS)
        log.info(f"[STARTUP] Gemini ready, models: {', '.join(config.GEMINI_MODELS)}")
    else:
        log.warning("[STARTUP] GEMINI_API_KEY is not set; test generation is disabled")

    yield

    if client is not None:
        await client.close()


app = FastAPI(
    title="AI Test Generator API",
    description="Generate, store and manage exam question sets from study notes",
    version=__version__,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─── Routers ───────────────────────────────────────────────────────────────────

app.include_router(auth.router)     # /api/auth/*
app.include_router(users.router)    # /api/users/me
app.include_router(tests.router)    # /api/tests/*
app.include_router(admin.router)    # /api/admin/*


@app.get("/")
def root():
    return {"ok": True, "message": "AI Test Generator API"}


@app.get("/api")
def api_root():
    return {"message": "API is working"}


@app.get("/health")
def health_check():
    return {"status": "healthy", "service": "ai-test-generator-api"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=5000)

# blog_server/main.py

from pathlib import Path
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from blog_server.api import auth, employees, health, posts
from blog_server.core.config import Settings, load_settings
from blog_server.core.logging import configure_logging
from blog_server.core.security import PasswordHasher, TokenCodec
from blog_server.core.storage import PUBLIC_PREFIX
from blog_server.database import create_db_engine, create_session_factory, init_db


logger = structlog.get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.debug)

    engine = create_db_engine(settings)
    init_db(engine)

    app = FastAPI(title="blog-server")

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.hasher = PasswordHasher(settings.bcrypt_rounds)
    app.state.token_codec = TokenCodec(
        settings.access_token_secret,
        algorithm=settings.token_algorithm,
        ttl=settings.token_ttl,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(employees.router)
    app.include_router(posts.router)

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(f"/{PUBLIC_PREFIX}", StaticFiles(directory=upload_dir), name=PUBLIC_PREFIX)

    if not settings.protect_post_routes:
        logger.warning("post_routes_unprotected", routes="/post/{blogid}")

    return app


def run():
    settings = load_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()

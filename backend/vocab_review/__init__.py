from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vocab_review.config import settings
from vocab_review.db import init_all_databases


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_all_databases(settings.data_dir)
    yield
    from vocab_review.services.session_registry import clear_sessions

    clear_sessions()


def create_app() -> FastAPI:
    application = FastAPI(
        title="Vocabulary Review Backend", version="0.1.0", lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from vocab_review.routers import review, words

    application.include_router(words.router, prefix="/words", tags=["words"])
    application.include_router(review.router, prefix="/review", tags=["review"])

    return application


app = create_app()

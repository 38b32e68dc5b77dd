from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from pratik_blog.audio import UNAVAILABLE_NOTICE
from pratik_blog.authoring import DraftForm, ai_fill
from pratik_blog.config import settings
from pratik_blog.errors import DraftValidationError
from pratik_blog.gemini import GeminiClient
from pratik_blog.models import PostDraft
from pratik_blog.store import PostStore, build_store
from pratik_blog.utils.logging import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


class DraftIn(BaseModel):
    title: str | None = None
    author: str | None = None
    content: str | None = None
    excerpt: str = ""
    image_url: str = ""
    tags: list[str] = Field(default_factory=list)


class GenerateIn(BaseModel):
    title: str = ""


def _page_body(page) -> dict:
    return {
        "data": [p.to_dict() for p in page.data],
        "has_more": page.has_more,
        "next_cursor": page.next_cursor,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("blog_api_started", posts=len(app.state.store), gemini=app.state.gemini.configured)
    yield
    logger.info("blog_api_stopped")


def create_app(store: PostStore | None = None, gemini: GeminiClient | None = None) -> FastAPI:
    app = FastAPI(
        title="Pratik Blog",
        description="Paginated blog feed with AI-assisted authoring and article narration.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store if store is not None else build_store()
    app.state.gemini = gemini if gemini is not None else GeminiClient()

    @app.exception_handler(DraftValidationError)
    async def draft_invalid(request: Request, exc: DraftValidationError):
        return JSONResponse(status_code=422, content={"detail": str(exc), "missing": exc.missing})

    @app.get("/health", tags=["Health"])
    async def health():
        return {
            "status": "ok",
            "service": "pratik-blog",
            "environment": settings.app_env,
        }

    @app.get("/posts", tags=["Posts"])
    async def list_posts(
        cursor: int = Query(0, ge=0),
        limit: int = Query(settings.page_size, gt=0),
    ):
        page = await app.state.store.list_posts(cursor, limit)
        return _page_body(page)

    @app.get("/posts/featured", tags=["Posts"])
    async def list_featured():
        return [p.to_dict() for p in await app.state.store.list_featured()]

    @app.post("/posts", tags=["Posts"], status_code=201)
    async def create_post(body: DraftIn):
        post = await app.state.store.insert_post(PostDraft(**body.model_dump()))
        return post.to_dict()

    @app.delete("/posts/{post_id}", tags=["Posts"], status_code=204)
    async def delete_post(post_id: str):
        await app.state.store.remove_post(post_id)

    @app.post("/drafts/generate", tags=["Authoring"])
    async def generate_draft(body: GenerateIn):
        form = await ai_fill(DraftForm(title=body.title), app.state.gemini)
        draft = form.to_draft()
        return {
            "title": form.title,
            "content": draft.content,
            "excerpt": draft.excerpt,
            "image_url": draft.image_url,
            "tags": draft.tags,
        }

    @app.post("/posts/{post_id}/speech", tags=["Audio"])
    async def synthesize(post_id: str):
        post = next((p for p in app.state.store.snapshot() if p.id == post_id), None)
        if post is None:
            raise HTTPException(status_code=404, detail="Post not found")

        audio = await app.state.gemini.synthesize_speech(post.content)
        if not audio:
            raise HTTPException(status_code=503, detail=UNAVAILABLE_NOTICE)
        return {
            "audio": audio,
            "encoding": "pcm_s16le",
            "sample_rate": settings.audio_sample_rate,
            "channels": settings.audio_channels,
        }

    return app


app = create_app()

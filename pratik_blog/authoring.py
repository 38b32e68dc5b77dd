"""Post authoring form with optional AI fill-in."""

import asyncio
from dataclasses import dataclass

from pratik_blog.errors import DraftValidationError
from pratik_blog.gemini import GeminiClient
from pratik_blog.models import PostDraft
from pratik_blog.utils.logging import get_logger

logger = get_logger(__name__)


def split_tags(raw: str) -> list[str]:
    """"AI, Tech, , Future" -> ["AI", "Tech", "Future"]"""
    return [t.strip() for t in raw.split(",") if t.strip()]


@dataclass
class DraftForm:
    """Raw form fields as typed by the author. Tags are comma-separated."""
    title: str = ""
    author: str = ""
    content: str = ""
    image_url: str = ""
    excerpt: str = ""
    tags: str = ""

    def to_draft(self) -> PostDraft:
        return PostDraft(
            title=self.title or None,
            author=self.author or None,
            content=self.content or None,
            excerpt=self.excerpt,
            image_url=self.image_url,
            tags=split_tags(self.tags),
        )


async def ai_fill(form: DraftForm, client: GeminiClient) -> DraftForm:
    """
    Fill content, excerpt, tags and cover image from the title.

    The article and image requests are independent and run concurrently.
    Both degrade to placeholders on failure, so this only raises when the
    title is missing.
    """
    if not form.title.strip():
        raise DraftValidationError("Please enter a title first!", missing=["title"])

    article, image_url = await asyncio.gather(
        client.generate_article(form.title),
        client.generate_cover_image(form.title),
    )

    form.content = article.content
    form.excerpt = article.excerpt
    form.tags = ", ".join(article.tags)
    form.image_url = image_url
    logger.info("draft_ai_filled", title=form.title, tags=len(article.tags))
    return form

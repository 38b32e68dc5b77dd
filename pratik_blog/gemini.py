"""
Generative collaborators: article text, cover image and speech.

Every call is attempted once and fails open. Article and image generation
return fixed placeholders; speech synthesis returns None, which callers
treat as an expected "unavailable" outcome rather than an error.
"""

import json
import random
import re
from dataclasses import dataclass, field

import httpx

from pratik_blog.config import settings
from pratik_blog.utils.logging import get_logger

logger = get_logger(__name__)

_MARKDOWN_MARKERS = re.compile(r"[*#_]")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")

_ARTICLE_PROMPT = (
    'Write a creative and engaging blog post body (approx 150-200 words) for a blog titled "{title}". '
    "Also provide a short excerpt (1 sentence) and 3 relevant tags. "
    'Format the output as JSON with keys: "content", "excerpt", "tags". '
    "Do not include markdown code blocks. Just raw JSON string."
)
_IMAGE_PROMPT = (
    "Generate a high quality, artistic, futuristic digital art cover image for a blog post "
    'titled: "{title}". Use 16:9 aspect ratio.'
)


@dataclass
class ArticleDraft:
    content: str
    excerpt: str
    tags: list[str] = field(default_factory=list)


def fallback_article() -> ArticleDraft:
    return ArticleDraft(
        content="Could not generate content at this time. Please try writing it yourself!",
        excerpt="AI generation failed.",
        tags=["Error"],
    )


def placeholder_image_url(rng: random.Random | None = None) -> str:
    n = (rng or random).randrange(1000)
    return f"https://picsum.photos/800/600?random={n}"


def prepare_speech_text(text: str, max_chars: int | None = None) -> str:
    """Strip emphasis markers and control characters; cap length with an ellipsis."""
    max_chars = max_chars or settings.speech_max_chars
    clean = _CONTROL_CHARS.sub("", _MARKDOWN_MARKERS.sub("", text))
    if len(clean) > max_chars:
        return clean[:max_chars] + "..."
    return clean


def _coerce_tags(raw) -> list[str]:
    """Models sometimes answer "AI, Tech" instead of ["AI", "Tech"]."""
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, list):
        raise ValueError(f"unexpected tags value: {raw!r}")
    return [str(t).strip() for t in raw if str(t).strip()]


def _parts(body: dict) -> list[dict]:
    candidates = body.get("candidates") or []
    if not candidates:
        return []
    return (candidates[0].get("content") or {}).get("parts") or []


class GeminiClient:
    """Thin async wrapper over the Generative Language generateContent endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        text_model: str | None = None,
        image_model: str | None = None,
        tts_model: str | None = None,
        voice: str | None = None,
        timeout: float | None = None,
        rng: random.Random | None = None,
    ):
        self.api_key = settings.gemini_api_key if api_key is None else api_key
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.text_model = text_model or settings.gemini_text_model
        self.image_model = image_model or settings.gemini_image_model
        self.tts_model = tts_model or settings.gemini_tts_model
        self.voice = voice or settings.tts_voice
        self.timeout = timeout or settings.gemini_timeout_seconds
        self._rng = rng

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def _generate(self, model: str, payload: dict) -> dict | None:
        """POST generateContent; returns the decoded body, or None on any failure."""
        url = f"{self.base_url}/models/{model}:generateContent"
        headers = {"x-goog-api-key": self.api_key}

        async with httpx.AsyncClient(timeout=self.timeout, headers=headers) as client:
            response = await client.post(url, json=payload)
            if response.status_code != 200:
                logger.warning("gemini_api_error", model=model,
                               status_code=response.status_code, body=response.text[:200])
                return None
            return response.json()

    # ------------------------------------------------------------------ #
    # Article
    # ------------------------------------------------------------------ #

    async def generate_article(self, title: str) -> ArticleDraft:
        if not self.configured:
            logger.warning("gemini_not_configured", operation="article")
            return fallback_article()

        payload = {
            "contents": [{"parts": [{"text": _ARTICLE_PROMPT.format(title=title)}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }
        try:
            body = await self._generate(self.text_model, payload)
            if body is None:
                return fallback_article()
            text = "".join(p.get("text", "") for p in _parts(body)) or "{}"
            data = json.loads(text)
            article = ArticleDraft(
                content=str(data["content"]),
                excerpt=str(data["excerpt"]),
                tags=_coerce_tags(data["tags"]),
            )
        except Exception as exc:
            logger.warning("gemini_article_failed", title=title, error=str(exc))
            return fallback_article()

        logger.info("gemini_article_generated", title=title, chars=len(article.content))
        return article

    # ------------------------------------------------------------------ #
    # Cover image
    # ------------------------------------------------------------------ #

    async def generate_cover_image(self, title: str) -> str:
        if not self.configured:
            logger.warning("gemini_not_configured", operation="image")
            return placeholder_image_url(self._rng)

        payload = {"contents": [{"parts": [{"text": _IMAGE_PROMPT.format(title=title)}]}]}
        try:
            body = await self._generate(self.image_model, payload)
        except Exception as exc:
            logger.warning("gemini_image_failed", title=title, error=str(exc))
            return placeholder_image_url(self._rng)

        for part in _parts(body or {}):
            inline = part.get("inlineData") or {}
            mime = inline.get("mimeType", "")
            if mime.startswith("image/") and inline.get("data"):
                logger.info("gemini_image_generated", title=title, mime_type=mime)
                return f"data:{mime};base64,{inline['data']}"

        logger.info("gemini_image_missing", title=title)
        return placeholder_image_url(self._rng)

    # ------------------------------------------------------------------ #
    # Speech
    # ------------------------------------------------------------------ #

    async def synthesize_speech(self, text: str, max_chars: int | None = None) -> str | None:
        """Return base64-encoded 16-bit PCM for `text`, or None when unavailable."""
        if not self.configured:
            logger.warning("gemini_not_configured", operation="speech")
            return None

        safe_text = prepare_speech_text(text, max_chars)
        payload = {
            "contents": [{"parts": [{"text": safe_text}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": self.voice}},
                },
            },
        }
        try:
            body = await self._generate(self.tts_model, payload)
        except Exception as exc:
            logger.warning("gemini_tts_failed", error=str(exc))
            return None

        parts = _parts(body or {})
        data = (parts[0].get("inlineData") or {}).get("data") if parts else None
        if not data:
            logger.info("gemini_tts_empty")
            return None

        logger.info("gemini_tts_generated", chars=len(safe_text))
        return data

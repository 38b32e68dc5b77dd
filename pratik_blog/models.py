from dataclasses import asdict, dataclass, field

from pratik_blog.errors import DraftValidationError

_REQUIRED_DRAFT_FIELDS = ("title", "author", "content")


@dataclass(frozen=True)
class Post:
    """A published blog post. Immutable once created."""
    id: str
    title: str
    excerpt: str
    content: str          # plain text, blank-line-delimited paragraphs
    author: str
    date: str             # display string, e.g. "Oct 24, 2023"
    image_url: str
    read_time: str        # display string, e.g. "5 min read"
    tags: tuple[str, ...] = ()

    def paragraphs(self) -> list[str]:
        return [p.strip() for p in self.content.split("\n\n") if p.strip()]

    def to_dict(self) -> dict:
        data = asdict(self)
        data["tags"] = list(self.tags)
        return data


@dataclass
class PostDraft:
    """A post as submitted by an author; id, date and read time are assigned on insert."""
    title: str | None = None
    author: str | None = None
    content: str | None = None
    excerpt: str = ""
    image_url: str = ""
    tags: list[str] = field(default_factory=list)

    def missing_fields(self) -> list[str]:
        return [name for name in _REQUIRED_DRAFT_FIELDS if not (getattr(self, name) or "").strip()]

    def validate(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise DraftValidationError(
                f"Missing required fields: {', '.join(missing)}", missing=missing
            )


@dataclass
class Page:
    """
    One page of posts.

    next_cursor is set iff has_more, and equals the requested offset plus the
    requested limit, so a short final page still advances deterministically.
    """
    data: list[Post]
    has_more: bool
    next_cursor: int | None = None

    def __post_init__(self):
        if self.has_more != (self.next_cursor is not None):
            raise ValueError("next_cursor must be set iff has_more is true")

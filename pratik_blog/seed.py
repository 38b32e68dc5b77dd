"""Mock dataset: five curated posts followed by a large generated archive."""

import random
from datetime import date, timedelta

from pratik_blog.models import Post

_GENERATED_COUNT = 500

_TITLES = [
    "The Secrets of Javascript", "Understanding Cloud Computing", "Healthy Habits for Devs",
    "The Rise of Remote Work", "Machine Learning Basics", "Cybersecurity Trends",
    "Mobile App Design", "Digital Marketing 101", "Blockchain Explained", "UI/UX Best Practices",
    "The Power of Python", "Rust vs Go", "Sustainable Tech", "Smart Home Innovations",
    "VR and AR Futures",
]
_AUTHORS = ["John Doe", "Jane Smith", "Robert Brown", "Lisa Wang", "David Wilson", "Emma Clark", "James Bond"]
_TAGS = ["Tech", "Life", "Coding", "Business", "Health", "Innovation", "Future", "Science"]

_LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, quis nostrud "
    "exercitation ullamco laboris nisi ut aliquip ex ea commodo consequat.\n\n"
    "Duis aute irure dolor in reprehenderit in voluptate velit esse cillum dolore eu "
    "fugiat nulla pariatur. Excepteur sint occaecat cupidatat non proident, sunt in culpa "
    "qui officia deserunt mollit anim id est laborum.\n\n"
    "This is placeholder content for article number {n}."
)

INITIAL_POSTS: list[Post] = [
    Post(
        id="1",
        title="The Future of AI in Web Development",
        excerpt="How generative AI is reshaping the way we build and deploy web applications.",
        content=(
            "Artificial Intelligence is no longer just a buzzword. It is fundamentally changing "
            "how developers write code, test applications, and even design user interfaces. "
            "From automated testing to intelligent code completion, the landscape is shifting rapidly..."
        ),
        author="Sarah Jenkins",
        date="Oct 24, 2023",
        image_url="https://picsum.photos/800/600?random=1",
        read_time="5 min read",
        tags=("AI", "Tech", "Future"),
    ),
    Post(
        id="2",
        title="Mastering Tailwind CSS",
        excerpt="A deep dive into utility-first CSS and how to build responsive layouts faster.",
        content=(
            "Tailwind CSS has revolutionized styling by providing a low-level utility belt. "
            "Instead of fighting with cascading overrides, developers can now compose designs "
            "directly in their markup. This guide explores advanced configuration..."
        ),
        author="Mike Chen",
        date="Oct 22, 2023",
        image_url="https://picsum.photos/800/600?random=2",
        read_time="8 min read",
        tags=("CSS", "Design", "Frontend"),
    ),
    Post(
        id="3",
        title="The Zen of React Hooks",
        excerpt="Understanding the mental model behind useEffect and useState.",
        content=(
            "Hooks introduced a new way to share stateful logic between components. However, "
            "they also introduced new pitfalls like infinite loops in useEffect. Let us unravel "
            "the mysteries of dependency arrays..."
        ),
        author="Emily Tao",
        date="Oct 20, 2023",
        image_url="https://picsum.photos/800/600?random=3",
        read_time="6 min read",
        tags=("React", "Code", "Tutorial"),
    ),
    Post(
        id="4",
        title="Minimalism in Digital Design",
        excerpt="Why less is often more when it comes to user experience.",
        content=(
            "Visual clutter kills conversion. In this post, we explore the principles of "
            "minimalism: whitespace, typography, and color theory. Learn how to guide the user "
            "eye without overwhelming them..."
        ),
        author="Alex Rivera",
        date="Oct 18, 2023",
        image_url="https://picsum.photos/800/600?random=4",
        read_time="4 min read",
        tags=("UX", "Design", "Minimalism"),
    ),
    Post(
        id="5",
        title="Exploring the Cosmos",
        excerpt="New discoveries from the James Webb Telescope.",
        content=(
            "The universe is vast and full of mysteries. Recent images from the JWST have "
            "revealed galaxies formed shortly after the Big Bang, challenging our current "
            "models of cosmology..."
        ),
        author="Dr. Alan Grant",
        date="Oct 15, 2023",
        image_url="https://picsum.photos/800/600?random=5",
        read_time="10 min read",
        tags=("Space", "Science", "Astronomy"),
    ),
]


def format_display_date(day: date) -> str:
    """Render a date the way post cards show it: "Oct 24, 2023"."""
    return f"{day:%b} {day.day}, {day.year}"


def generate_archive(
    count: int = _GENERATED_COUNT,
    rng: random.Random | None = None,
    today: date | None = None,
) -> list[Post]:
    """Build `count` filler posts with ids gen-0 .. gen-{count-1}."""
    rng = rng or random.Random()
    today = today or date.today()
    posts: list[Post] = []

    for i in range(count):
        title = rng.choice(_TITLES)
        published = today - timedelta(days=rng.randrange(365))
        posts.append(
            Post(
                id=f"gen-{i}",
                title=f"{title} - Vol. {i + 1}",
                excerpt=(
                    f"This is an automatically generated summary for post volume {i + 1}. "
                    f"It discusses key insights regarding {title.lower()} and why it matters today."
                ),
                content=_LOREM.format(n=i + 1),
                author=rng.choice(_AUTHORS),
                date=format_display_date(published),
                image_url=f"https://picsum.photos/800/600?random={i + 20}",
                read_time=f"{rng.randint(3, 12)} min read",
                tags=(rng.choice(_TAGS), "Archive"),
            )
        )
    return posts


def seed_posts(rng: random.Random | None = None) -> list[Post]:
    return [*INITIAL_POSTS, *generate_archive(rng=rng)]

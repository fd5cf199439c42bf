"""Build and client configuration via environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Blog settings loaded from environment (``BLOG_`` prefix)."""

    # Build pipeline paths
    content_dir: Path = Path("content/posts")
    output_dir: Path = Path("source/blog/data")

    # Post defaults
    default_author: str = "Franco"
    default_category: str = "Uncategorized"
    words_per_minute: int = 200
    excerpt_max_length: int = 160

    # Unpublished posts stay in posts.json unless this is set
    exclude_unpublished_from_index: bool = False

    # Client rendering
    site_name: str = "Franco's Blog"
    data_base_url: str = "http://localhost:8000/blog/data"
    http_timeout: float = 15.0
    posts_per_page: int = 6
    recent_posts_limit: int = 5
    related_posts_limit: int = 3

    model_config = {"env_file": ".env", "env_prefix": "BLOG_", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Content layout: <CONTENT_DIR>/<POSTS_ROOT_DIR>/<slug>/<POST_ENTRY_FILENAME>
    CONTENT_DIR: str = "my-blog-contents"
    POSTS_ROOT_DIR: str = "external-posts"
    POST_ENTRY_FILENAME: str = "index.md"

    # "live" reads the filesystem, "snapshot" reads the generated file
    CONTENT_MODE: Literal["live", "snapshot"] = "live"
    SNAPSHOT_PATH: str = "generated/posts.json"

    # Caching
    CACHE_TTL_SECONDS: int = 60 * 60

    # Protected posts
    PROTECTED_COOKIE_MAX_AGE: int = 60 * 60 * 12

    ENVIRONMENT: str = "development"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Our own API Key
    BLOG_API_KEY: str = ""

    @property
    def posts_root(self) -> Path:
        return (Path(self.CONTENT_DIR) / self.POSTS_ROOT_DIR).resolve()

    @property
    def expected_layout(self) -> str:
        return f"{self.CONTENT_DIR}/{self.POSTS_ROOT_DIR}/<slug>/{self.POST_ENTRY_FILENAME}"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.osf.io/v2/"
DEFAULT_TEST_BASE_URL = "https://api.test.osf.io/v2/"
DEFAULT_STORAGE_URL = "https://files.osf.io/v1/"


class Settings(BaseSettings):
    """Client settings loaded from environment variables with OSF_ prefix."""

    # API
    base_url: str = DEFAULT_BASE_URL
    user_agent: str = "osfapi-python"
    timeout: float = 30.0
    # Storage (file uploads)
    storage_url: str = DEFAULT_STORAGE_URL
    storage_provider: str = "osfstorage"
    # Pagination
    default_per_page: int = 10

    model_config = SettingsConfigDict(env_prefix="OSF_", env_file=".env")


@lru_cache
def get_settings() -> Settings:
    """Return cached client settings instance."""
    return Settings()

"""Engine configuration loaded from environment variables.

Upstream locations, week-id anchoring, cache TTLs and logging switches.
"""

from datetime import date

from pydantic import Field
from pydantic_settings import BaseSettings

from tusur_timetable.cache import CacheType

DEFAULT_TIMETABLE_URL = "https://timetable.tusur.ru"
DEFAULT_UNIVERSITY_URL = "https://tusur.ru"
DEFAULT_FACULTY_PHOTOS_URL = (
    "https://tusur.ru/ru/o-tusure/struktura-i-organy-upravleniya/"
    "departament-obrazovaniya/fakultety-i-kafedry"
)

_DAY = 24 * 60 * 60


class TimetableConfig(BaseSettings):
    """Engine configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Upstream sites (scraped, read-only)
    timetable_base_url: str = Field(
        default=DEFAULT_TIMETABLE_URL,
        description="Timetable site base URL",
    )
    university_base_url: str = Field(
        default=DEFAULT_UNIVERSITY_URL,
        description="University site base URL (faculty photo assets)",
    )
    faculty_photos_url: str = Field(
        default=DEFAULT_FACULTY_PHOTOS_URL,
        description="University page listing faculties with photos",
    )

    # Upstream week numbering (reverse-engineered from the live site)
    base_week_id: int = Field(
        default=786,
        description="week_id of the anchor week on the timetable site",
    )
    base_week_anchor: date | None = Field(
        default=None,
        description=(
            "Monday that carries base_week_id. Empty means the first Monday "
            "of the requested date's academic year"
        ),
    )

    # HTTP
    http_timeout_seconds: float = Field(
        default=30.0,
        description="Total timeout for a single upstream request",
    )
    user_agent: str = Field(
        default="tusur-timetable/1.0 (+https://timetable.tusur.ru) Python-httpx",
        description="User-Agent header sent upstream",
    )
    resource_fetch_concurrency: int = Field(
        default=8,
        description="Maximum parallel resource-link fetches per schedule",
    )

    # Cache TTLs in seconds, passed through to the cache store
    cache_ttl_faculties: int = Field(default=30 * _DAY)
    cache_ttl_courses: int = Field(default=7 * _DAY)
    cache_ttl_schedule: int = Field(default=_DAY)
    cache_ttl_logos: int = Field(default=30 * _DAY)
    cache_ttl_photos: int = Field(default=30 * _DAY)
    cache_ttl_resources: int = Field(default=_DAY)

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def ttl_for(self, cache_type: CacheType) -> int:
        """TTL in seconds configured for a cache type."""
        return getattr(self, f"cache_ttl_{cache_type.value}")


# Singleton pattern
_config: TimetableConfig | None = None


def get_config() -> TimetableConfig:
    """Get the engine configuration singleton.

    Returns:
        TimetableConfig: Engine configuration instance
    """
    global _config
    if _config is None:
        _config = TimetableConfig()
    return _config

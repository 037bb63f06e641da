from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TmdbSettings(BaseSettings):
    """
    Loads TMDB credentials and seeding limits from .env.
    """

    tmdb_api_key: str = Field(alias="TMDB_API_KEY")
    tmdb_base_url: str = Field(
        default="https://api.themoviedb.org/3", alias="TMDB_BASE_URL"
    )
    tmdb_language: str | None = Field(default=None, alias="TMDB_LANGUAGE")

    # Outbound throttling (fixed window of one second)
    requests_per_second: int = Field(default=40, alias="REQUESTS_PER_SECOND", gt=0)
    max_workers: int = Field(default=4, alias="TMDB_MAX_WORKERS", gt=0)
    timeout_seconds: float = Field(default=10.0, alias="TMDB_TIMEOUT_SECONDS", gt=0)
    max_attempts: int = Field(default=1, alias="TMDB_MAX_ATTEMPTS", ge=1)

    # Run size
    max_movies: int = Field(default=500, alias="MAX_MOVIES", ge=0)
    max_tv_shows: int = Field(default=500, alias="MAX_TV_SHOWS", ge=0)
    seasons_per_show: int = Field(default=3, alias="SEASONS_PER_SHOW", ge=0)

    output_dir: str = Field(default="output", alias="OUTPUT_DIR")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

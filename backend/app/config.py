from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_path: Path = Path.cwd() / "data"
    api_prefix: str = "/api"
    host: str = "127.0.0.1"
    port: int = 8080
    cors_origins: list[str] = [
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ]

    # "fulltext" matches whole words only, so "lap" will not find "laptop".
    match_mode: Literal["substring", "fulltext"] = "substring"
    source_timeout_seconds: float = 10.0
    # When off, one failing source fails the whole search.
    isolate_source_failures: bool = False

    # Client side
    api_base_url: str = "http://localhost:8080"
    debounce_ms: int = 150
    client_timeout_seconds: float = 10.0

    @property
    def db_path(self) -> Path:
        return self.data_path / "search.sqlite"

    model_config = {"env_prefix": "SEARCH_"}


settings = Settings()

from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG, DATA_DIR, DB_FILENAME, RATES_CACHE_TTL_SECONDS, RATE_SOURCE).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Currency Lens"
    debug: bool = True
    version: str = "0.1.0"

    # Data & persistence (persisted rate cache + extension settings)
    data_dir: Path = Path("data")
    db_filename: str = "currency_lens.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided

    # Exchange rates / caching
    rates_cache_ttl_seconds: int = 3600  # 1 hour
    exchange_api_base_url: str = "https://api.frankfurter.dev/v1"
    http_timeout_seconds: float = 5.0

    # Allowed: 'frankfurter' (remote HTTP source), 'static' (fixed offline table)
    rate_source: str = "frankfurter"

    # Warm the rate cache once when the app starts
    prefetch_rates_on_startup: bool = False

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        else:
            self.db_path = Path(self.db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        allowed = {"frankfurter", "static"}
        if self.rate_source not in allowed:
            raise ValueError(
                f"Unsupported rate_source '{self.rate_source}'. Allowed: {allowed}"
            )
        if self.rates_cache_ttl_seconds <= 0:
            raise ValueError("rates_cache_ttl_seconds must be positive")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings

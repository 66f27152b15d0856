# ABOUTME: Runtime configuration for shelfcount jobs, read from the environment.
# ABOUTME: Loads a .env file first, then builds an immutable Settings instance.

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DB_PATH = Path.home() / ".shelfcount" / "catalog.db"


@dataclass(frozen=True)
class Settings:
    """Configuration shared by every job.

    concurrency_limit and batch_size drive the inventory runner: at most
    concurrency_limit availability requests are outstanding at once, and
    results are committed every batch_size items.
    """

    db_path: Path = DEFAULT_DB_PATH

    # Catalog search service
    vega_base_url: str = "https://na2.iiivega.com"
    vega_customer_domain: str = "nypl.na2.iiivega.com"
    vega_host_domain: str = "borrow.nypl.org"
    vega_anonymous_user_id: str = "e100515c-ac6c-4e5d-859d-9c64e8aaf0c5"
    vega_location_code: str = "jm"

    # Book metadata service
    goodreads_base_url: str = "https://www.goodreads.com"
    goodreads_api_key: str | None = None

    # Inventory sampling
    concurrency_limit: int = 5
    batch_size: int = 50

    request_interval: float = 1.0
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.concurrency_limit < 1:
            raise ValueError(f"concurrency_limit must be >= 1, got {self.concurrency_limit}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def load_settings(env_file: Path | None = None) -> Settings:
    """Build Settings from environment variables.

    Values in an existing environment win over the .env file. Unset variables
    fall back to the Settings defaults.

    Args:
        env_file: Optional explicit .env path. Defaults to python-dotenv's
            search from the current directory.

    Raises:
        ValueError: If a numeric variable cannot be parsed or is out of range.
    """
    load_dotenv(env_file)

    defaults = Settings()
    db_path = os.getenv("SHELFCOUNT_DB")

    return Settings(
        db_path=Path(db_path).expanduser() if db_path else defaults.db_path,
        vega_base_url=os.getenv("VEGA_BASE_URL", defaults.vega_base_url),
        vega_customer_domain=os.getenv("VEGA_CUSTOMER_DOMAIN", defaults.vega_customer_domain),
        vega_host_domain=os.getenv("VEGA_HOST_DOMAIN", defaults.vega_host_domain),
        vega_anonymous_user_id=os.getenv(
            "VEGA_ANONYMOUS_USER_ID", defaults.vega_anonymous_user_id
        ),
        vega_location_code=os.getenv("VEGA_LOCATION_CODE", defaults.vega_location_code),
        goodreads_base_url=os.getenv("GOODREADS_BASE_URL", defaults.goodreads_base_url),
        goodreads_api_key=os.getenv("GOODREADS_API_KEY") or None,
        concurrency_limit=_env_int("INVENTORY_CONCURRENCY", defaults.concurrency_limit),
        batch_size=_env_int("INVENTORY_BATCH_SIZE", defaults.batch_size),
        request_interval=_env_float("REQUEST_INTERVAL", defaults.request_interval),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
    )

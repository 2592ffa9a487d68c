import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_SEED_URL = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    seed_url: str = DEFAULT_SEED_URL
    http_timeout: float = 20.0
    query_timeout: float = 10.0
    cors_origins: tuple[str, ...] = field(default=("*",))
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 5000


def _split_origins(raw: str) -> tuple[str, ...]:
    origins = tuple(part.strip() for part in raw.split(",") if part.strip())
    return origins or ("*",)


def get_settings() -> Settings:
    load_dotenv()
    data_dir = Path(os.getenv("SALESBOARD_DATA_DIR", Path.cwd() / ".data"))
    db_path = Path(os.getenv("SALESBOARD_DB_PATH", data_dir / "salesboard.sqlite"))
    return Settings(
        data_dir=data_dir,
        db_path=db_path,
        seed_url=os.getenv("SALESBOARD_SEED_URL", DEFAULT_SEED_URL),
        http_timeout=float(os.getenv("SALESBOARD_HTTP_TIMEOUT", "20")),
        query_timeout=float(os.getenv("SALESBOARD_QUERY_TIMEOUT", "10")),
        cors_origins=_split_origins(os.getenv("SALESBOARD_CORS_ORIGINS", "*")),
        log_level=os.getenv("SALESBOARD_LOG_LEVEL", "INFO"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
    )

import logging
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables with the ENRICHER_ prefix.
    Example: ENRICHER_ALLOWED_STATUSES=for_sale,pending
    """
    model_config = {"env_prefix": "ENRICHER_"}

    # Pipeline configuration
    allowed_statuses: str = "for_sale,pending,sold"

    # Export configuration
    output_indent: int = 2
    output_file: Path = Path("listings_enriched.json")

    # Logging configuration
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    # API configuration
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def status_set(self) -> frozenset[str]:
        """Parse comma-separated status allowlist (lower-cased)."""
        return frozenset(
            s.strip().lower() for s in self.allowed_statuses.split(",") if s.strip()
        )


settings = Settings()


def setup_logging():
    """Configure root logging for the CLI and the API server."""
    log_level = getattr(logging, settings.log_level.upper())
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(log_format))

    # File handler (if log file is configured)
    handlers = [console_handler]
    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(log_format))
        handlers.append(file_handler)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

"""
Configuration for Song Queue Service.
"""

import os
from dataclasses import dataclass, field
from typing import List


def parse_origins(raw: str) -> List[str]:
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


@dataclass
class SongQueueConfig:
    """Song Queue Service configuration settings."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    # Queue settings
    max_queue_size: int = 0  # 0 means unbounded
    history_size: int = 50   # Number of played songs to keep

    # Logging
    log_level: str = "INFO"
    log_file: str = ""

    @classmethod
    def from_env(cls) -> "SongQueueConfig":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8080")),
            cors_origins=parse_origins(os.getenv("CORS_ORIGIN", "*")),
            max_queue_size=int(os.getenv("QUEUE_MAX_SIZE", "0")),
            history_size=int(os.getenv("QUEUE_HISTORY_SIZE", "50")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("LOG_FILE", ""),
        )

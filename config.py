"""
Shard planner configuration.

Module-level constants for the sharding core, plus environment-driven
settings for the collaborators (catalog endpoint, simulation, logging).
"""
import logging
import sys
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

# Sharding
MAX_SHARD_COUNT = 32  # Hard upper bound on ranges per table

# Catalog network
NETWORK_MODE = "simulated"  # "simulated" or "http"
CATALOG_URL = "http://localhost:8080"
HTTP_TIMEOUT = 10  # seconds

# Simulated catalog
SIMULATED_LATENCY_MS = 10
SIMULATED_FAILURE_RATE = 0.0

# Logging
LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class Settings(BaseSettings):
    """Settings loaded from SHARDPLAN_* environment variables."""

    network_mode: str = Field(default=NETWORK_MODE)
    catalog_url: str = Field(default=CATALOG_URL)
    http_timeout: float = Field(default=HTTP_TIMEOUT)

    simulated_latency_ms: float = Field(default=SIMULATED_LATENCY_MS)
    simulated_failure_rate: float = Field(default=SIMULATED_FAILURE_RATE)

    log_level: str = Field(default=LOG_LEVEL)

    class Config:
        env_prefix = "SHARDPLAN_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def is_simulated(self) -> bool:
        """Whether the catalog runs in-memory."""
        return self.network_mode.lower() == "simulated"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def setup_logging(level: str = None):
    """Configure root logging with a UTF-8 stdout handler."""
    handler = logging.StreamHandler(sys.stdout)

    if hasattr(handler.stream, 'reconfigure'):
        handler.stream.reconfigure(encoding='utf-8', errors='replace')

    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level or get_settings().log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

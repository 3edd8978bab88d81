# Environment settings (.env)
# Every scraper/cache/limit knob lives here so tests and deployments can override it.
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Page fetcher
    fetch_timeout_s: float = 10.0
    fetch_max_retries: int = 2            # retries after the first attempt
    backoff_base_s: float = 1.0
    backoff_max_s: float = 8.0
    retry_after_max_s: float = 30.0       # cap for server-provided Retry-After

    # Circuit breaker (per origin)
    circuit_failure_threshold: int = 3
    circuit_cooldown_s: float = 5 * 60

    # Orchestrator
    tier1_timeout_s: float = 12.0
    tier2_timeout_s: float = 10.0
    tier2_threshold: int = 3              # run tier 2 only when tier 1 returns fewer recipes
    max_links_per_site: int = 3
    results_limit: int = 5
    run_log_size: int = 50

    # Result cache
    cache_ttl_s: float = 15 * 60
    cache_max_entries: int = 100

    # Search rate limit (per client IP)
    rate_limit_window_s: float = 60.0
    rate_limit_max: int = 10

    # Server
    cors_origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173"]
    log_level: str = "INFO"
    log_file: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


settings = Settings()

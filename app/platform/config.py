from pathlib import Path
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "Contact Finder"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"

    # ── Crawl heuristics ────────────────────────
    SEARCH_KEYWORDS: str = "contact,about"
    EMAIL_DENYLIST: str = "example.com,test.com,domain.com"

    # ── Timing (seconds) ────────────────────────
    STATIC_FETCH_TIMEOUT: float = 15.0
    NAVIGATION_TIMEOUT: float = 60.0
    SETTLE_DELAY: float = 60.0
    INTER_SITE_DELAY: float = 1.0

    # ── Browser ─────────────────────────────────
    USER_AGENT: str = (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    )
    CHROMEDRIVER_PATH: Optional[str] = None
    HEADLESS: bool = True

    @property
    def search_keywords(self) -> List[str]:
        return [keyword.lower() for keyword in _split_csv(self.SEARCH_KEYWORDS)]

    @property
    def email_denylist(self) -> List[str]:
        return [domain.lower() for domain in _split_csv(self.EMAIL_DENYLIST)]

    @property
    def cors_origins(self) -> List[str]:
        return _split_csv(self.CORS_ORIGINS) or ["*"]

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()

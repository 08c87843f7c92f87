from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Endpoints
    WATCH_URL_TEMPLATE: str = "https://www.youtube.com/watch?v={video_id}"
    BASE_URL: str = "https://www.youtube.com"
    API_BASE_URL: str = "https://www.youtube.com/api/"

    # HTTP
    REQUEST_TIMEOUT: float = 10.0
    USER_AGENT: str = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ACCEPT_LANGUAGE: str = "en-US,en;q=0.9"

    # Extraction
    EXTRACTION_STRATEGY: Literal["pattern", "window"] = "pattern"
    WINDOW_SIZE: int = 512
    UNESCAPE_HTML: bool = False

    # System Settings
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TIMEDTEXT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    openai_api_key: str | None = None
    model_name: str = "gpt-4o-mini"
    temperature: float = 0.8
    max_tokens: int | None = None

    default_count: int = 3
    min_count: int = 1
    max_count: int = 10
    comment_language: str = "Korean"

    fetch_strategy: Literal["http", "browser"] = "http"
    prompt_format: Literal["json", "text"] = "json"

    user_agent: str = "Mozilla/5.0"
    request_timeout: float = 10.0
    render_timeout_ms: int = 15000
    post_url_template: str = "https://www.instagram.com/p/{shortcode}/"

    static_dir: str | None = None
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"


def get_settings() -> Settings:
    return Settings()

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SESSION_SECRET = "billing-dev-session-secret-change-me"
DEFAULT_DEMO_PASSWORD = "billing-demo"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="BILLING_", extra="ignore")

    app_name: str = "Billing & Inventory"
    env: str = "dev"
    api_host: str = "0.0.0.0"
    api_port: int = 5000

    database_url: str = "sqlite+pysqlite:///./billing.db"

    # text | json
    log_level: str = "INFO"
    log_format: str = "text"

    session_secret: str = DEFAULT_SESSION_SECRET
    session_cookie_name: str = "billing_session"
    session_ttl_seconds: int = 8 * 60 * 60
    session_cookie_secure: bool = False
    password_hash_iterations: int = Field(default=240_000, ge=1)

    bootstrap_demo_on_startup: bool = False
    demo_username: str = "admin"
    demo_password: str = DEFAULT_DEMO_PASSWORD

    def model_post_init(self, __context) -> None:
        if self.env.lower() == "dev":
            return

        insecure_items: list[str] = []
        if self.session_secret == DEFAULT_SESSION_SECRET:
            insecure_items.append("BILLING_SESSION_SECRET")
        if self.bootstrap_demo_on_startup and self.demo_password == DEFAULT_DEMO_PASSWORD:
            insecure_items.append("BILLING_DEMO_PASSWORD")

        if insecure_items:
            raise ValueError(
                "insecure default secrets are not allowed outside dev mode; set env vars: "
                + ", ".join(sorted(insecure_items))
            )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

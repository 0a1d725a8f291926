from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List, Optional

DEFAULT_API_BASE_URL = "https://jellyfish-app-z83s2.ondigitalocean.app"

class Settings(BaseSettings):
    """
    Centralized runtime configuration for the admin console.
    All defaults are sensible for dev-mode; ops override via CONSOLE_* ENV.
    """
    model_config = SettingsConfigDict(
        env_prefix="CONSOLE_",
        env_file=".env",
        extra="ignore",
    )

    # --- Remote HR API ---
    api_base_url: str = Field(default=DEFAULT_API_BASE_URL)
    request_timeout: float = Field(default=30.0, gt=0)

    # --- Job list loading ---
    detail_batch_size: int = Field(default=4, ge=1)  # concurrent viewPost calls

    # --- Approval workflow ---
    approval_gating: bool = Field(default=True)
    allow_employee_fallback: bool = Field(default=False)

    # --- Console sessions ---
    session_cookie_name: str = Field(default="console_session")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # --- Logging ---
    log_level: str = Field(default="INFO")
    log_dir: Optional[str] = Field(default=None)

def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()

# Create a singleton instance
settings = get_settings()

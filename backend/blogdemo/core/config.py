"""
Configuration management using Pydantic Settings
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# config.py is at: backend/blogdemo/core/config.py
_current_file = Path(__file__).resolve()
_backend_dir = _current_file.parent.parent.parent
_project_root = _backend_dir.parent
ENV_FILE = _project_root / ".env"
# Fallback: try in backend/ directory if not found in project root
if not ENV_FILE.exists():
    ENV_FILE = _backend_dir / ".env"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE, override=True)

UNPERMITTED_ACTIONS = ("log", "raise", "ignore")


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "blogdemo"
    app_env: str = Field(default="development", description="Application environment")
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API port")
    allowed_origins: str = Field(
        default="http://localhost:8000",
        description="Allowed CORS origins (comma-separated)"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_sqlalchemy: bool = Field(default=False, description="Enable SQLAlchemy query logging")
    log_uvicorn_access: bool = Field(default=False, description="Enable Uvicorn access logging")
    log_module_levels: Optional[str] = Field(
        default=None,
        description='Module-specific log levels (JSON string, e.g., {"blogdemo.api": "DEBUG"})'
    )
    log_format: str = Field(
        default="json",
        description="Log format: 'json' for structured logging, 'text' for plain text"
    )
    log_file_enabled: bool = Field(default=False, description="Enable file logging")
    log_file_path: str = Field(
        default="logs/blogdemo.log",
        description="Path to log file (relative to project root)"
    )
    log_file_retention: int = Field(default=30, ge=1, description="Number of days to keep log files")
    filter_parameters: str = Field(
        default="password,token,secret",
        description="Parameter names whose values are masked in logs (comma-separated)"
    )

    # Database
    database_url: str = Field(
        default=f"sqlite:///{_backend_dir / 'blogdemo.db'}",
        description="SQLAlchemy database URL"
    )
    database_pool_size: int = Field(default=5, ge=1, description="Database pool size (server databases only)")
    database_max_overflow: int = Field(default=10, ge=0, description="Database max overflow (server databases only)")

    # Strong parameters
    action_on_unpermitted_parameters: str = Field(
        default="log",
        description="What to do when permit drops keys: 'log', 'raise' or 'ignore'"
    )
    always_permitted_parameters: str = Field(
        default="controller,action",
        description="Keys never reported as unpermitted (comma-separated)"
    )

    @field_validator("action_on_unpermitted_parameters")
    @classmethod
    def validate_unpermitted_action(cls, v):
        """Normalise and check the unpermitted parameters action"""
        v = (v or "log").strip().lower()
        if v not in UNPERMITTED_ACTIONS:
            raise ValueError(f"action_on_unpermitted_parameters must be one of {', '.join(UNPERMITTED_ACTIONS)}")
        return v

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def filter_parameters_list(self) -> List[str]:
        return [name.strip() for name in self.filter_parameters.split(",") if name.strip()]

    @property
    def always_permitted_parameters_list(self) -> List[str]:
        return [name.strip() for name in self.always_permitted_parameters.split(",") if name.strip()]

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()

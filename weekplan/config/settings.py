import os
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_database_url() -> str:
    """Get database URL, using an absolute path for the default SQLite file.

    WEEKPLAN_DATABASE_URL takes precedence; otherwise a `weekplan.db` file next
    to the project root is used.
    """
    db_url = os.getenv("WEEKPLAN_DATABASE_URL", "")
    if db_url:
        logger.info(f"Using WEEKPLAN_DATABASE_URL from environment: {db_url}")
        return db_url

    db_path = Path(__file__).parent.parent.parent / "weekplan.db"
    return f"sqlite:///{db_path.resolve()}"


class Settings(BaseSettings):
    database_url: str = Field(default_factory=get_database_url)
    log_level: str = Field(default="INFO")
    log_file: str | None = Field(default=None)

    # Calendar grid
    opening_hour: int = Field(default=6, description="Earliest hour of day a session may start")
    pixels_per_hour: float = Field(default=60.0, description="Vertical pixels for one hour")
    base_column_width: float = Field(default=95.0, description="Day column width when panel width is unknown")
    panel_width: float = Field(default=0.0, description="Total grid width, 0 to use base_column_width")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="WEEKPLAN_",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("opening_hour")
    @classmethod
    def validate_opening_hour(cls, value: int) -> int:
        if not 0 <= value <= 23:
            raise ValueError(f"opening_hour must be between 0 and 23, got {value}")
        return value

    @field_validator("pixels_per_hour", "base_column_width")
    @classmethod
    def validate_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError(f"must be positive, got {value}")
        return value

    @field_validator("panel_width")
    @classmethod
    def validate_panel_width(cls, value: float) -> float:
        if value < 0:
            logger.warning(f"Negative panel_width {value}, falling back to base column width")
            return 0.0
        return value


settings = Settings()

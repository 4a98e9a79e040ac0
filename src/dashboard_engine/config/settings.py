from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings managed via Pydantic Settings.
    Reads variables from environment and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # --- Application Meta ---
    APP_NAME: str = "Dashboard Engine"

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = False

    # --- Data Ingestion Limits ---
    MAX_UPLOAD_SIZE_MB: int = 10

    # An object column is a category when it has few distinct values
    CATEGORY_MAX_UNIQUE: int = Field(50, ge=1)
    CATEGORY_MAX_UNIQUE_RATIO: float = Field(0.5, gt=0.0, le=1.0)
    DATE_DAYFIRST: bool = False

    # --- Charts ---
    CHART_TOP_N: int = Field(10, ge=1)
    CURRENCY_LABEL: str = "Ks"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise the level name; unknown names fall back to INFO."""
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            return "INFO"
        return level


settings = Settings()

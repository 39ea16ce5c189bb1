from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    anthropic_api_key: str = ""
    vision_model: str = "claude-sonnet-4-5-20250929"

    # Anthropic API timeout settings (seconds)
    anthropic_timeout: int = 60
    anthropic_connect_timeout: int = 10

    # History log
    history_max_entries: int = 50
    history_storage_key: str = "phytoscan_analysis_history"

    # Persistence backend: "file", "sql" or "memory"
    storage_backend: str = "file"
    storage_dir: str = ".phytoscan"
    database_url: str = "sqlite:///phytoscan.db"

    upload_dir: str = "uploads/leaves"

    # Image quality thresholds (grayscale 0-255)
    quality_dark_mean: float = 60.0
    quality_overexposed_level: int = 250
    quality_overexposed_ratio: float = 0.25
    quality_shadow_level: int = 40
    quality_shadow_ratio: float = 0.2
    quality_min_side: int = 300

    class Config:
        env_file = ".env"


settings = Settings()

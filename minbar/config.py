from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Groq
    groq_api_key: str = "gsk_placeholder"
    default_model: str = "llama-3.3-70b-versatile"

    # Storage
    database_path: str = "minbar.db"
    storage_root: str = "khutbahs"

    # Live delivery
    tick_interval_seconds: float = 1.0
    next_keys: list[str] = ["ArrowRight", " ", "Space"]
    previous_keys: list[str] = ["ArrowLeft"]
    low_time_threshold_seconds: int = 30
    default_segment_seconds: int = 120
    default_view_mode: str = "cards"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()

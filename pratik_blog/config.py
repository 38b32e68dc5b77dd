from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # App
    app_env: str = Field(default="development")
    log_level: str = Field(default="info")

    # Gemini
    gemini_api_key: str = Field(default="")
    gemini_base_url: str = Field(default="https://generativelanguage.googleapis.com/v1beta")
    gemini_text_model: str = Field(default="gemini-2.5-flash")
    gemini_image_model: str = Field(default="gemini-2.5-flash-image")
    gemini_tts_model: str = Field(default="gemini-2.5-flash-preview-tts")
    tts_voice: str = Field(default="Kore")
    gemini_timeout_seconds: float = Field(default=60.0)

    # Feed
    page_size: int = Field(default=9)
    featured_count: int = Field(default=5)
    sentinel_poll_seconds: float = Field(default=0.25)
    carousel_interval_seconds: float = Field(default=5.0)

    # Store (simulated network delay, off by default)
    store_latency_enabled: bool = Field(default=False)

    # Speech / audio
    speech_max_chars: int = Field(default=2000)
    audio_sample_rate: int = Field(default=24000)
    audio_channels: int = Field(default=1)

    # Theme preference
    preferences_path: str = Field(default=".pratik_blog.json")
    prefers_color_scheme: str = Field(default="light")

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


settings = Settings()

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class QuizSettings(BaseModel):
    gemini_model: str = "gemini-2.5-flash"
    passing_score: int = 80
    default_topic: str = "Video Assessment"
    default_channel: str = "Unknown Channel"

quiz_settings = QuizSettings()

class Settings(BaseSettings):
    # tells pydantic-settings to read .env
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    gemini_api_key: str = Field(default="", alias="GEMINI_API_KEY")
    gemini_model: str = Field(default=quiz_settings.gemini_model, alias="GEMINI_MODEL")
    gemini_timeout_sec: float = Field(default=60.0, gt=0, alias="GEMINI_TIMEOUT_SEC")

    supabase_url: str = Field(default="", alias="SUPABASE_URL")
    supabase_key: str = Field(default="", alias="SUPABASE_KEY")
    certificates_table: str = Field(default="certificates", alias="CERTIFICATES_TABLE")

    passing_score: int = Field(default=quiz_settings.passing_score, ge=0, le=100, alias="PASSING_SCORE")
    http_timeout_sec: float = Field(default=10.0, gt=0, alias="HTTP_TIMEOUT_SEC")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

settings = Settings()

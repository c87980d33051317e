from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Centralized application settings leveraging environment overrides.
    """

    app_name: str = "Meeting Notes Summarizer"
    environment: str = Field("development", validation_alias="ENVIRONMENT")
    port: int = Field(5000, validation_alias="PORT")
    log_level: str = "INFO"
    allow_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ]
    )
    max_payload_bytes: int = Field(50 * 1024 * 1024, ge=1024)  # 50 MB JSON body limit

    # Remote model settings
    hugging_face_token: Optional[str] = Field(None, validation_alias="HUGGING_FACE_TOKEN")
    summarization_model_url: str = (
        "https://api-inference.huggingface.co/models/facebook/bart-large-cnn"
    )
    remote_enabled: bool = Field(True, description="Try the hosted model before the fallback")
    remote_max_input_chars: int = Field(4000, ge=1)
    remote_max_length: int = Field(500, ge=1)
    remote_min_length: int = Field(50, ge=0)
    remote_timeout_seconds: float = Field(30.0, gt=0)

    # Extractive fallback settings
    fallback_max_sentences: int = Field(5, ge=1)
    fallback_min_sentence_chars: int = Field(20, ge=0)

    # Mail settings
    email_user: Optional[str] = Field(None, validation_alias="EMAIL_USER")
    email_app_password: Optional[str] = Field(None, validation_alias="EMAIL_APP_PASSWORD")
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = Field(465, ge=1)
    default_email_subject: str = "Meeting Summary"

    # Uploads and static frontend
    upload_dir: str = "uploads"
    max_upload_bytes: int = Field(5 * 1024 * 1024, ge=1)  # 5 MB
    static_dir: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True


@lru_cache
def get_settings() -> Settings:
    return Settings()

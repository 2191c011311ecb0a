from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables or .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Qdrant
    qdrant_url: str = "http://localhost:6333"
    qdrant_api_key: str | None = None
    qdrant_collection: str = "i"
    vector_size: int = Field(default=3072, ge=1)

    # OpenAI (only needed when text is embedded)
    openai_api_key: str | None = None
    openai_embedding_model: str = "text-embedding-3-large"

    # Student report persistence
    reports_storage_path: str = ".local_storage/student_reports.json"
    reports_storage_key: str = "studentReports"
    reports_persistence_enabled: bool = True

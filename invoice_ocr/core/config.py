from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = Field("invoice-ocr-service", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Which parser handles OCR text when the caller doesn't say:
    # "rules" (deterministic), "llm" (generative), "auto" (llm if configured)
    parser_mode: Literal["rules", "llm", "auto"] = Field("rules", alias="PARSER_MODE")

    # Azure Document Intelligence (OCR backend)
    az_di_endpoint: str | None = Field(default=None, alias="AZ_DI_ENDPOINT")
    az_di_api_key: str | None = Field(default=None, alias="AZ_DI_API_KEY")
    ocr_timeout_seconds: float = Field(60.0, alias="OCR_TIMEOUT_SECONDS")

    # LLM (optional generative parser, Azure OpenAI deployment)
    llm_base_url: str | None = Field(default=None, alias="LLM_BASE_URL")
    llm_api_key: str | None = Field(default=None, alias="LLM_API_KEY")
    llm_deployment: str | None = Field(default=None, alias="LLM_DEPLOYMENT")
    llm_api_version: str = Field("2024-06-01", alias="LLM_API_VERSION")
    llm_timeout_seconds: float = Field(30.0, alias="LLM_TIMEOUT_SECONDS")
    llm_max_retries: int = Field(2, alias="LLM_MAX_RETRIES")

    # Matches the 15mb JSON body limit of the upload endpoint
    max_upload_bytes: int = Field(15 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")

    # CORS allowed origins (comma-separated list for production deployment)
    cors_origins: str = Field("http://localhost:3000,http://127.0.0.1:3000", alias="CORS_ORIGINS")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

settings = Settings()

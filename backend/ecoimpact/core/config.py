from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "ecoimpact-backend"

    # CORS
    CORS_ALLOW_ORIGINS: list[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"

    # OpenAI (image -> product extraction)
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"

    # Open Food Facts (barcode -> product lookup)
    BARCODE_LOOKUP_ENABLED: bool = False
    OFF_BASE_URL: str = "https://world.openfoodfacts.org/api/v2/product"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Analysis
    ANALYSIS_DELAY_SECONDS: float = 0.0
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    HISTORY_MAX_ITEMS: int = 500

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()

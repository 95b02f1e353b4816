from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    OPENAI_API_KEY: str | None = None
    OPENAI_BASE_URL: str | None = None
    ANALYSIS_MODEL: str = "gpt-4o-mini"
    ANALYSIS_MAX_TOKENS: int = 8192
    ANALYSIS_TEMPERATURE: float = 0.2

    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"


settings = Settings()

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DB_URL: str = "sqlite+aiosqlite:///./stockledger.db"
    DB_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()

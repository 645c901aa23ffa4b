from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "expense-tracker"
    environment: str = "development"
    allowed_origins: str = "http://localhost:3000"

    @property
    def parsed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # MongoDB settings
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "expense_tracker"
    mongo_collection: str = "transactions"
    store_timeout_seconds: float = 5.0

    # JWT settings
    jwt_secret_key: str = "change-me-in-production-please-32b"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # Listing defaults
    default_page_size: int = 10
    max_page_size: int = 100

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True

    # Application
    app_name: str = "Hit Stats"
    app_version: str = "1.0.0"

    # Database
    database_url: str = "sqlite:///./hits.db"

    # Logging
    log_level: str = "INFO"
    sql_echo: bool = False  # Log every SQL statement at INFO

    # Hit validation
    max_path_length: int = 1024  # Matches the path column length
    max_http_status_length: int = 3
    # Skip the app-level (host, path, status, date) uniqueness check and
    # rely on the unique constraint in the database instead
    leave_uniqueness_check_to_db: bool = False

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()

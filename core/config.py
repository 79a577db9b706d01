# WORKFLOW: Core configuration management for the dump importer.
# Used by: Import script, database destination, logging setup
# Configuration includes:
# - Destination database URL and load behaviour (replace, batch size)
# - SQLite bulk-load tuning
# - Logging level and output format
#
# Loaded at startup; command-line flags override individual values.

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./dump.db"
    replace: bool = False
    batch_size: int = 100000
    sqlite_bulk_pragmas: bool = True

    # Archives
    seven_zip_path: str = "7z"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    class Config:
        env_file = ".env"
        env_prefix = "STACKDUMP_"
        case_sensitive = False


settings = Settings()

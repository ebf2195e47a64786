from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Local database used by the API and the *-local scripts
    DATABASE_URL: str = "sqlite+aiosqlite:///./toast.db"
    MIGRATIONS_DIR: str = "migrations"
    LOG_LEVEL: str = "INFO"

    # Remote Cloudflare D1 database (required by the remote scripts only)
    CLOUDFLARE_API_TOKEN: Optional[str] = None
    CLOUDFLARE_ACCOUNT_ID: Optional[str] = None
    CLOUDFLARE_DATABASE_ID: Optional[str] = None
    D1_API_BASE_URL: str = "https://api.cloudflare.com/client/v4"
    D1_VERIFY_SSL: bool = True
    D1_TIMEOUT_SECONDS: Optional[float] = None

    # "sqlalchemy" -> DATABASE_URL, "wrangler" -> npx wrangler d1 execute --local
    LOCAL_BACKEND: str = "sqlalchemy"
    WRANGLER_DATABASE_NAME: str = "toast-app-db"
    WRANGLER_STATE_DIR: str = ".wrangler/state/v3/d1/miniflare-D1DatabaseObject"

    # This tells Pydantic to read from the .env file
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


# Create a single instance of the settings to use everywhere
settings = Settings()

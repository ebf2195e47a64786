import logging

from sqlalchemy.ext.asyncio import create_async_engine

from app.core.config import Settings
from app.core.d1.errors import ConfigError
from app.core.d1.executor import D1Credentials, D1Executor, QueryExecutor
from app.core.d1.local import SqlAlchemyExecutor, WranglerExecutor
from app.core.database import enable_sqlite_foreign_keys

logger = logging.getLogger(__name__)

REQUIRED_ENV = ("CLOUDFLARE_API_TOKEN", "CLOUDFLARE_ACCOUNT_ID", "CLOUDFLARE_DATABASE_ID")
PLACEHOLDER_PREFIX = "your_"


def credentials_from_settings(settings: Settings) -> D1Credentials:
    """Validate the remote credentials before any network call is made."""
    missing = [name for name in REQUIRED_ENV if not getattr(settings, name)]
    if missing:
        raise ConfigError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    placeholders = [
        name
        for name in REQUIRED_ENV
        if PLACEHOLDER_PREFIX in getattr(settings, name)
    ]
    if placeholders:
        raise ConfigError(
            f"Placeholder values still in use: {', '.join(placeholders)}"
        )

    return D1Credentials(
        api_token=settings.CLOUDFLARE_API_TOKEN,
        account_id=settings.CLOUDFLARE_ACCOUNT_ID,
        database_id=settings.CLOUDFLARE_DATABASE_ID,
    )


def remote_executor(settings: Settings) -> D1Executor:
    credentials = credentials_from_settings(settings)
    if not settings.D1_VERIFY_SSL:
        logger.warning("SSL verification is disabled for D1 API requests")
    return D1Executor(
        credentials,
        base_url=settings.D1_API_BASE_URL,
        verify=settings.D1_VERIFY_SSL,
        timeout=settings.D1_TIMEOUT_SECONDS,
    )


def local_executor(settings: Settings) -> QueryExecutor:
    backend = settings.LOCAL_BACKEND.lower()
    if backend == "sqlalchemy":
        engine = enable_sqlite_foreign_keys(create_async_engine(settings.DATABASE_URL))
        return SqlAlchemyExecutor(engine)
    if backend == "wrangler":
        return WranglerExecutor(
            settings.WRANGLER_DATABASE_NAME,
            state_dir=settings.WRANGLER_STATE_DIR,
            verify_ssl=settings.D1_VERIFY_SSL,
        )
    raise ConfigError(
        f"Unknown LOCAL_BACKEND {settings.LOCAL_BACKEND!r}, use 'sqlalchemy' or 'wrangler'"
    )

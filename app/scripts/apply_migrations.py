"""
Apply migrations to the remote D1 database using the HTTP API.

Usage:
    toast-apply-migrations
"""

import asyncio
import sys

from app.core.config import settings
from app.core.d1.errors import ConfigError, ExecutionError
from app.core.d1.factory import remote_executor
from app.core.d1.migrations import MigrationApplier
from app.scripts.common import configure_logging, print_failure, print_report


async def run() -> int:
    print("🔄 Applying migrations to remote D1 database...\n")

    try:
        executor = remote_executor(settings)
    except ConfigError as error:
        print_failure("Missing required environment variables!", error)
        return 1

    applier = MigrationApplier(executor)
    try:
        print(f"📄 Loading migrations from {settings.MIGRATIONS_DIR}")
        report = await applier.apply_directory(settings.MIGRATIONS_DIR)
        print_report(report, verb="Executed")
        print("\n✅ All migrations applied successfully!\n")

        print("📋 Verifying tables...")
        tables = await applier.list_tables()
    except ExecutionError as error:
        print_failure("Migration failed!", error)
        return 1
    finally:
        await executor.close()

    if tables:
        print("   Tables in database:")
        for table in tables:
            print(f"   ✓ {table}")
    else:
        print("   No user tables found")

    print("\n✨ Migration complete!\n")
    return 0


def main() -> int:
    configure_logging(settings)
    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())

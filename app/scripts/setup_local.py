"""
Set up the local development database from scratch:
1. Wipe any existing local database
2. Apply all migrations
3. Fetch the data from the remote database
4. Insert it locally

Usage:
    toast-setup-local
"""

import asyncio
import sys

from app.core.config import settings
from app.core.d1.errors import ConfigError, ExecutionError
from app.core.d1.factory import local_executor, remote_executor
from app.core.d1.orchestrators import setup_local, table_counts
from app.scripts.common import configure_logging, print_counts, print_failure, print_report


async def run() -> int:
    print("🚀 Setting up local development database...\n")

    try:
        remote = remote_executor(settings)
        local = local_executor(settings)
    except ConfigError as error:
        print_failure("Invalid configuration!", error)
        return 1

    try:
        report = await setup_local(remote, local, settings.MIGRATIONS_DIR)
        print_report(report)

        print("\n📊 Verifying local database setup...")
        print_counts(await table_counts(local), suffix=" total")
    except ExecutionError as error:
        print_failure("Database setup failed!", error)
        print("\n🔧 Try running these commands manually:")
        print("   1. toast-seed-local")
        print("   2. toast-sync-to-local")
        return 1
    finally:
        await remote.close()
        await local.close()

    print("\n✨ Local database setup completed successfully!\n")
    print("💡 Your local database now contains a copy of production data")
    print("💡 Changes you make locally won't affect the remote database")
    return 0


def main() -> int:
    configure_logging(settings)
    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())

"""
Copy the remote D1 data into the local database.

Local rows that don't exist remotely are deleted.

Usage:
    toast-sync-to-local
"""

import asyncio
import sys

from app.core.config import settings
from app.core.d1.errors import ConfigError, ExecutionError
from app.core.d1.factory import local_executor, remote_executor
from app.core.d1.orchestrators import sync
from app.scripts.common import configure_logging, print_failure, print_report


async def run() -> int:
    print("🔄 Syncing remote data to local database...\n")

    try:
        remote = remote_executor(settings)
        local = local_executor(settings)
    except ConfigError as error:
        print_failure("Invalid configuration!", error)
        return 1

    try:
        report = await sync(remote, local)
    except ExecutionError as error:
        print_failure("Sync failed!", error)
        return 1
    finally:
        await remote.close()
        await local.close()

    print_report(report, verb="Synced")

    if report.failed:
        print(f"\n⚠️ Sync finished with {len(report.failed)} failed items")
        print("💡 Your local database may not match the remote database")
        return 0

    print("\n✨ Sync completed successfully!\n")
    print("💡 Your local database now matches the remote database")
    return 0


def main() -> int:
    configure_logging(settings)
    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())

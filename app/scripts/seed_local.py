"""
Seed the local database (LOCAL_BACKEND) with the sample users and toasts.

Usage:
    toast-seed-local
"""

import asyncio
import sys

from app.core.config import settings
from app.core.d1.errors import ConfigError
from app.core.d1.factory import local_executor
from app.core.d1.orchestrators import seed, table_counts
from app.scripts.common import configure_logging, print_counts, print_failure, print_report


async def run() -> int:
    print("🌱 Seeding local database...\n")

    try:
        executor = local_executor(settings)
    except ConfigError as error:
        print_failure("Invalid local database configuration!", error)
        return 1

    try:
        report = await seed(executor)
        print_report(report)

        print("\n📊 Verification:")
        print_counts(await table_counts(executor), suffix=" total")
    finally:
        await executor.close()

    print("\n✨ Local database seeding completed!\n")
    print("💡 You can now start the API to test with local data")
    return 0


def main() -> int:
    configure_logging(settings)
    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())

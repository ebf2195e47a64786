"""
Seed the remote D1 database with the sample users and toasts.

Usage:
    toast-seed-remote
"""

import asyncio
import sys

from app.core.config import settings
from app.core.d1.errors import ConfigError, ExecutionError
from app.core.d1.factory import remote_executor
from app.core.d1.orchestrators import seed, seed_summary
from app.scripts.common import (
    configure_logging,
    print_counts,
    print_credentials,
    print_failure,
    print_report,
)


async def run() -> int:
    print("🌱 Seeding remote D1 database...\n")

    try:
        executor = remote_executor(settings)
    except ConfigError as error:
        print_failure("Missing required environment variables!", error)
        return 1

    print_credentials(executor.credentials)

    try:
        print("📊 Starting database seeding...\n")
        report = await seed(executor)
        print_report(report)

        print("\n📊 Verification:")
        summary = await seed_summary(executor)
    except ExecutionError as error:
        print_failure("Seeding failed!", error)
        return 1
    finally:
        await executor.close()

    print_counts(summary["counts"], suffix=" total")

    print("\n📋 Sample users:")
    for user in summary["sample_users"]:
        print(f"   - {user['name']} ({user['userID'][:8]}...)")

    print("\n📋 Sample toasts:")
    for toast in summary["sample_toasts"]:
        print(
            f"   - {toast['toasterName']} toasted {toast['toastieName']} at {toast['toastTime']}"
        )

    print("\n✨ Database seeding completed successfully!\n")
    return 0


def main() -> int:
    configure_logging(settings)
    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())

"""
Clear all data from the remote D1 database.

Usage:
    toast-clear --confirm

Without --confirm nothing is touched and the exit status is 1.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from app.core.config import settings
from app.core.d1.errors import ConfigError, ExecutionError
from app.core.d1.factory import remote_executor
from app.core.d1.orchestrators import CONFIRM_TOKEN, clear_remote, table_counts
from app.scripts.common import (
    configure_logging,
    print_counts,
    print_credentials,
    print_failure,
    print_report,
)


async def run(confirm_token: Optional[str]) -> int:
    print("🧹 Clearing remote D1 database...\n")
    print("⚠️  WARNING: This will delete ALL data from the PRODUCTION database!")
    print("⚠️  This action cannot be undone!\n")

    # Safety check comes before anything else, including credentials
    if confirm_token != CONFIRM_TOKEN:
        print("❌ Safety check failed!")
        print(f"To proceed, run: toast-clear {CONFIRM_TOKEN}")
        return 1

    try:
        executor = remote_executor(settings)
    except ConfigError as error:
        print_failure("Missing required environment variables!", error)
        return 1

    print_credentials(executor.credentials)

    try:
        print("📋 Current database state:")
        print_counts(await table_counts(executor))

        print("\n🗑️ Clearing data...")
        report = await clear_remote(executor, confirm_token)
        print_report(report, verb="Cleared")

        print("\n📊 Verification:")
        print_counts(await table_counts(executor), suffix=" remaining")
    except ExecutionError as error:
        print_failure("Clearing failed!", error)
        return 1
    finally:
        await executor.close()

    print("\n✨ Database clearing completed successfully!\n")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Delete every row from the remote database.")
    parser.add_argument(
        "--confirm",
        action="store_true",
        help="Required. Confirms the destructive run against production.",
    )
    args = parser.parse_args(argv)

    configure_logging(settings)
    return asyncio.run(run(CONFIRM_TOKEN if args.confirm else None))


if __name__ == "__main__":
    sys.exit(main())

"""
Check that the remote D1 database is reachable with the configured API token.

Usage:
    toast-test-connection  (python -m app.scripts.check_connection)
"""

import asyncio
import sys

from app.core.config import settings
from app.core.d1.errors import ConfigError, ExecutionError
from app.core.d1.factory import remote_executor
from app.core.d1.orchestrators import check_connection
from app.scripts.common import configure_logging, print_credentials, print_failure


async def run() -> int:
    print("🔄 Testing remote D1 database connection...\n")

    try:
        executor = remote_executor(settings)
    except ConfigError as error:
        print_failure("Invalid credentials!", error)
        print("\n📝 Set CLOUDFLARE_API_TOKEN, CLOUDFLARE_ACCOUNT_ID and")
        print("   CLOUDFLARE_DATABASE_ID in your .env file.")
        print("   The token needs the Account → D1 → Edit permission.")
        return 1

    print_credentials(executor.credentials)

    try:
        print("📊 Fetching database tables...")
        result = await check_connection(executor)
    except ExecutionError as error:
        print_failure("Connection test failed!", error)
        return 1
    finally:
        await executor.close()

    print("\n✅ Connected successfully!\n")
    print("📋 Tables in your database:")
    if not result["tables"]:
        print("   (No tables found - database might be empty)")
    for table in result["tables"]:
        print(f"   - {table}")

    for table, count in result["counts"].items():
        print(f"\nTotal {table}: {count}")

    print("\n✨ Connection test completed successfully!\n")
    return 0


def main() -> int:
    configure_logging(settings)
    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())

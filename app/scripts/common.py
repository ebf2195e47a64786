import logging

from app.core.config import Settings
from app.core.d1.executor import D1Credentials
from app.core.d1.report import RunReport


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.LOG_LEVEL.upper())


def print_credentials(credentials: D1Credentials) -> None:
    print("✅ Environment variables loaded:")
    print(f"   Account ID: {credentials.account_id}")
    print(f"   Database ID: {credentials.database_id}")
    print(f"   API Token: {credentials.masked_token}\n")


def print_failure(title: str, error: Exception) -> None:
    print(f"\n❌ {title}")
    print(f"   Error: {error}")


def print_report(report: RunReport, verb: str = "Added") -> None:
    """One line per item: ✅ done, ⚠️ skipped or failed (the run went on)."""
    for item in report.items:
        if item.outcome.ok:
            print(f"   ✅ {verb} {item.label}")
        elif item.skipped:
            print(f"   ⚠️  {item.label} skipped: {item.outcome.message}")
        else:
            print(f"   ⚠️ {item.label} failed: {item.outcome.message}")

    if report.failed:
        print(f"   ⚠️ {len(report.failed)} of {len(report.items)} items failed")


def print_counts(counts: dict, suffix: str = "") -> None:
    labels = {"users": "👥 Users", "toasts": "🍞 Toasts"}
    for table, count in counts.items():
        if count is None:
            print(f"   {labels[table]}: table doesn't exist")
        else:
            print(f"   {labels[table]}{suffix}: {count}")

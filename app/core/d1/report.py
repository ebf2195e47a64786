from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from app.core.d1.executor import ExecutionOutcome


@dataclass
class ItemOutcome:
    """What happened to one row / one statement in a best-effort run."""

    label: str
    outcome: ExecutionOutcome
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.outcome.ok or self.skipped


@dataclass
class RunReport:
    """Ordered per-item outcomes. Nothing is dropped, failures stay visible."""

    name: str
    items: List[ItemOutcome] = field(default_factory=list)

    def add(
        self, label: str, outcome: ExecutionOutcome, skipped: bool = False
    ) -> ItemOutcome:
        item = ItemOutcome(label=label, outcome=outcome, skipped=skipped)
        self.items.append(item)
        return item

    def extend(self, other: "RunReport") -> None:
        self.items.extend(other.items)

    @property
    def succeeded(self) -> List[ItemOutcome]:
        return [i for i in self.items if i.outcome.ok]

    @property
    def skipped(self) -> List[ItemOutcome]:
        return [i for i in self.items if i.skipped]

    @property
    def failed(self) -> List[ItemOutcome]:
        return [i for i in self.items if not i.ok]

    @property
    def ok(self) -> bool:
        return not self.failed

    def find(self, label: str) -> Optional[ItemOutcome]:
        for item in self.items:
            if item.label == label:
                return item
        return None

    def summary(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "total": len(self.items),
            "succeeded": len(self.succeeded),
            "skipped": len(self.skipped),
            "failed": [
                {"label": i.label, "error": i.outcome.message} for i in self.failed
            ],
        }

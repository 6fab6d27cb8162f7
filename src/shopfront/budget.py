"""Performance budget tracking for transferred bytes."""

import logging
import re
from collections.abc import Mapping

from shopfront.types import BudgetReport

logger = logging.getLogger(__name__)

DEFAULT_BUDGETS: dict[str, int] = {
    "js": 250_000,
    "css": 50_000,
    "images": 500_000,
    "total": 1_000_000,
}

_IMAGE_PATTERN = re.compile(r"\.(jpg|jpeg|png|gif|webp|svg)$", re.IGNORECASE)


def classify_url(url: str) -> str:
    """Budget category of a URL; unknown types count against js."""
    if ".js" in url:
        return "js"
    if ".css" in url:
        return "css"
    if _IMAGE_PATTERN.search(url.split("?", 1)[0]):
        return "images"
    return "js"


class PerformanceBudget:
    """Accumulate transfer sizes per category and warn on overruns."""

    def __init__(self, budgets: Mapping[str, int] | None = None) -> None:
        self._budgets = {**DEFAULT_BUDGETS, **(budgets or {})}
        self._metrics = dict.fromkeys(self._budgets, 0)
        self._warned: set[str] = set()

    def track(self, url: str, size: int) -> None:
        if size <= 0:
            return
        category = classify_url(url)
        self._metrics[category] += size
        self._metrics["total"] += size
        self._check(category)
        self._check("total")

    def _check(self, category: str) -> None:
        used, budget = self._metrics[category], self._budgets[category]
        if used > budget and category not in self._warned:
            self._warned.add(category)
            logger.warning(
                "Performance budget exceeded for %s: %d / %d bytes",
                category,
                used,
                budget,
            )

    def report(self) -> BudgetReport:
        return BudgetReport(
            metrics=dict(self._metrics),
            budgets=dict(self._budgets),
            within_budget=self._metrics["total"] <= self._budgets["total"],
        )

    def reset(self) -> None:
        self._metrics = dict.fromkeys(self._budgets, 0)
        self._warned.clear()

import logging
from typing import Protocol

from .models import ContestSummary

logger = logging.getLogger(__name__)


class Reporter(Protocol):
    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def progress(self, completed: int, total: int, message: str) -> None: ...

    def summary(self, summary: ContestSummary) -> None: ...


def progress_bar(completed: int, total: int, width: int = 30) -> str:
    filled = round(width * completed / total) if total else width
    return "[" + "#" * filled + "-" * (width - filled) + "]"


class LoggingReporter:
    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def info(self, message: str) -> None:
        self.log.info(message)

    def success(self, message: str) -> None:
        self.log.info("OK %s", message)

    def warning(self, message: str) -> None:
        self.log.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is None:
            self.log.error(message)
        else:
            self.log.error("%s: %s", message, exc)

    def progress(self, completed: int, total: int, message: str) -> None:
        pct = round(completed / total * 100) if total else 100
        self.log.info(
            "%s %3d%% (%d/%d) %s",
            progress_bar(completed, total),
            pct,
            completed,
            total,
            message,
        )

    def summary(self, summary: ContestSummary) -> None:
        rows = [
            ("Total", str(summary.total)),
            ("Successful", str(summary.succeeded)),
            ("Failed", str(summary.failed)),
            ("Success Rate", f"{summary.success_rate:.1f}%"),
        ]
        self.log.info("Scraping summary for %s", summary.contest.canonical_name)
        for metric, value in rows:
            self.log.info("  %-12s %s", metric, value)
        if summary.failed_ids:
            self.log.warning("Failed problems:")
            for pid in summary.failed_ids:
                self.log.warning("  - %s", pid)

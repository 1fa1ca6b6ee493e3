import asyncio
import logging
import time
from pathlib import Path

from .base import BaseScraper
from .contest import contest_dir, derive_problem_id, parse_contest_url, tasks_url
from .extract import degenerate_fields, extract_problem
from .models import ContestSummary, FetchOutcome, Problem, ScraperConfig
from .reporting import LoggingReporter, Reporter
from .retry import retry
from .storage import save_contest_index, save_problem

logger = logging.getLogger(__name__)


def batched(items: list[str], size: int) -> list[list[str]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


class ContestScraper:
    """Scrape every task of a contest in fixed-size waves.

    Each wave runs ``config.concurrency`` fetches concurrently and is fully
    awaited before the next one starts, with ``config.batch_pause_seconds``
    between waves. A problem that still fails after its retries is recorded
    as a failed :class:`FetchOutcome`; it never aborts the contest.
    """

    def __init__(
        self,
        scraper: BaseScraper,
        reporter: Reporter | None = None,
        config: ScraperConfig | None = None,
    ):
        self.scraper = scraper
        self.reporter: Reporter = reporter or LoggingReporter()
        self.config = config or ScraperConfig()
        self._completed = 0
        self._total = 0

    async def scrape_contest(self, contest_url: str) -> ContestSummary:
        reference = parse_contest_url(contest_url)
        start = time.perf_counter()
        out_dir = contest_dir(reference, self.config.output_root)
        listing_url = tasks_url(contest_url)

        self.reporter.info(
            f"Contest {reference.canonical_name} "
            f"(type={reference.kind.upper()}, number={reference.sequence_number}) "
            f"-> {out_dir}/"
        )

        def on_listing_retry(attempt: int, exc: Exception) -> None:
            self.reporter.warning(
                f"Retrying to fetch contest tasks "
                f"({attempt}/{self.config.listing_max_attempts}): {exc}"
            )

        task_urls = await retry(
            lambda: self.scraper.fetch_task_listing(listing_url),
            max_attempts=self.config.listing_max_attempts,
            base_delay=self.config.listing_retry_delay_seconds,
            on_retry=on_listing_retry,
        )
        self.reporter.success(f"Found {len(task_urls)} tasks")

        outcomes = await self.scrape_problems(out_dir, task_urls)
        summary = ContestSummary(
            contest=reference, contest_url=contest_url, outcomes=outcomes
        )

        index_path = await asyncio.to_thread(
            save_contest_index,
            out_dir,
            summary.problems,
            reference.canonical_name,
            contest_url,
        )
        self.reporter.info(f"Contest index: {index_path}")
        self.reporter.summary(summary)
        elapsed = time.perf_counter() - start
        self.reporter.success(f"All tasks saved to: {out_dir}/ in {elapsed:.1f}s")
        return summary

    async def scrape_problems(
        self, out_dir: Path, task_urls: list[str]
    ) -> list[FetchOutcome]:
        self._completed = 0
        self._total = len(task_urls)
        outcomes: list[FetchOutcome] = []
        waves = batched(task_urls, max(1, self.config.concurrency))
        for n, wave in enumerate(waves):
            results = await asyncio.gather(
                *(self.fetch_one(out_dir, url) for url in wave)
            )
            outcomes.extend(results)
            if n < len(waves) - 1:
                await self._pause()
        return outcomes

    async def _pause(self) -> None:
        await asyncio.sleep(self.config.batch_pause_seconds)

    async def _fetch_problem(self, url: str) -> Problem:
        document = await self.scraper.fetch_document(url)
        return extract_problem(document, url)

    async def fetch_one(self, out_dir: Path, url: str) -> FetchOutcome:
        derived_id = derive_problem_id(url)
        attempts = self.config.problem_max_attempts

        def on_retry(attempt: int, exc: Exception) -> None:
            self.reporter.warning(
                f"Retry {attempt}/{attempts} for {derived_id}: {exc}"
            )

        try:
            problem = await retry(
                lambda: self._fetch_problem(url),
                max_attempts=attempts,
                base_delay=self.config.problem_retry_delay_seconds,
                on_retry=on_retry,
            )
            missing = degenerate_fields(problem)
            if missing:
                self.reporter.warning(
                    f"{derived_id}: page yielded no {', '.join(missing)}"
                )
            await asyncio.to_thread(
                save_problem,
                out_dir,
                problem,
                self.config.template_path,
                derived_id,
            )
        except Exception as e:
            self._completed += 1
            logger.debug("Giving up on %s", url, exc_info=True)
            self.reporter.error(
                f"Failed to fetch {derived_id} after {attempts} attempts", e
            )
            return FetchOutcome(
                url=url,
                derived_id=derived_id,
                succeeded=False,
                failure=e,
                error=str(e),
            )

        self._completed += 1
        self.reporter.progress(
            self._completed, self._total, f"{problem.id} completed"
        )
        return FetchOutcome(
            url=url, derived_id=derived_id, succeeded=True, problem=problem
        )

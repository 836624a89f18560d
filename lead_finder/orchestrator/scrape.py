"""Scrape orchestrator that enriches records with website contact details."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ..contacts import ContactExtractor
from ..errors import ExtractionError, InvalidInputError
from ..models import IN_PROGRESS, BusinessRecord, ScrapeFailed, ScrapeNotStarted, ScrapeState, ScrapeSucceeded
from .results import ResultSet

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]
ResultCallback = Callable[[BusinessRecord], None]


def is_scrape_candidate(record: BusinessRecord) -> bool:
    """Whether "scrape all" should visit ``record``."""

    return bool(record.website_url) and isinstance(record.scrape_state, ScrapeNotStarted)


class ScrapeOrchestrator:
    """Runs the contact extractor against records of a shared :class:`ResultSet`."""

    def __init__(
        self,
        results: ResultSet,
        extractor: ContactExtractor,
        *,
        result_callback: Optional[ResultCallback] = None,
    ) -> None:
        self._results = results
        self._extractor = extractor
        self._result_callback = result_callback

    def scrape(self, record_id: str) -> BusinessRecord:
        """Scrape a single record and store the outcome on it."""

        record = self._results.get(record_id)
        if record is None:
            raise KeyError(record_id)

        self._store(record, IN_PROGRESS)
        state: ScrapeState
        try:
            contact_info = self._extractor.scrape(record.website_url)
        except (InvalidInputError, ExtractionError) as exc:
            LOGGER.warning("Scrape failed for %s: %s", record.name, exc)
            state = ScrapeFailed(str(exc))
        else:
            state = ScrapeSucceeded(contact_info)
        return self._store(record, state)

    def pending(self) -> List[BusinessRecord]:
        return [record for record in self._results.snapshot() if is_scrape_candidate(record)]

    def scrape_all(self, progress_callback: Optional[ProgressCallback] = None) -> int:
        """Scrape every eligible record one after another.

        Records without a website, already scraped, or previously failed are
        skipped, so repeated runs only visit new work. Returns the number of
        records scraped.
        """

        candidates = self.pending()
        total = len(candidates)
        scraped = 0
        for index, candidate in enumerate(candidates, start=1):
            current = self._results.get(candidate.id)
            if current is not None and is_scrape_candidate(current):
                self.scrape(candidate.id)
                scraped += 1
            if progress_callback:
                progress_callback(index, total)
        LOGGER.info("Scrape all finished: %s websites visited", scraped)
        return scraped

    def _store(self, record: BusinessRecord, state: ScrapeState) -> BusinessRecord:
        try:
            updated = self._results.update(record.id, lambda current: current.with_scrape_state(state))
        except KeyError:
            # A newer search replaced the result set while this scrape was running.
            LOGGER.debug("Record %s left the result set; discarding scrape state", record.id)
            return record.with_scrape_state(state)
        if self._result_callback:
            self._result_callback(updated)
        return updated

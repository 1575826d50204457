from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Set

from app.application.interfaces import ICategoryRouter, IThrottle
from app.application.models import (
    BatchOutcome,
    BatchRequest,
    ItemOutcome,
    ItemStatus,
    ResultMap,
    RouteConfig,
)
from app.application.search.search_client import SearchClient
from app.application.search.throttle import NoThrottle
from app.core.exceptions import SearchError

logger = logging.getLogger(__name__)

DEADLINE_EXCEEDED = "batch deadline exceeded"


class BatchSearchUseCase:
    """Fan a batch of (query, category) pairs out to the search client.

    At most ``max_concurrency`` items search at the same time. Items that
    cannot be routed are skipped and failed items are left out of the result
    map; one bad item never fails the batch. ``dispatch`` returns only after
    every item task has finished.
    """

    def __init__(
        self,
        search_client: SearchClient,
        router: ICategoryRouter,
        throttle: Optional[IThrottle] = None,
        *,
        max_concurrency: int = 4,
        result_limit: int = 5,
        query_hint: str = "photo",
        batch_timeout: Optional[float] = None,
    ) -> None:
        self.search_client = search_client
        self.router = router
        self.throttle = throttle or NoThrottle()
        self.max_concurrency = max(1, int(max_concurrency))
        self.result_limit = result_limit
        self.query_hint = (query_hint or "").strip()
        self.batch_timeout = batch_timeout

    def embellish(self, query: str) -> str:
        """Append the domain hint used to bias provider results."""
        if not self.query_hint:
            return query
        return f"{query} {self.query_hint}"

    async def dispatch(self, request: BatchRequest) -> BatchOutcome:
        request.validate()

        results = ResultMap()
        # Outcomes settled before the politeness pause, kept if the pause is cancelled
        settled: Dict[int, ItemOutcome] = {}
        semaphore = asyncio.Semaphore(self.max_concurrency)
        tasks = [
            asyncio.create_task(
                self._process_item(i, query, category, semaphore, results, settled)
            )
            for i, (query, category) in enumerate(
                zip(request.queries, request.categories)
            )
        ]

        outcomes: List[ItemOutcome] = []
        if tasks:
            pending: Set[asyncio.Task] = set()
            try:
                _, pending = await asyncio.wait(tasks, timeout=self.batch_timeout)
            finally:
                # Also reached when the caller is cancelled: no task outlives dispatch
                unfinished = [task for task in tasks if not task.done()]
                for task in unfinished:
                    task.cancel()
                if unfinished:
                    await asyncio.gather(*unfinished, return_exceptions=True)

            if pending:
                logger.warning(
                    "Batch deadline of %.1fs exceeded, cancelled %d item(s)",
                    self.batch_timeout,
                    len(pending),
                )

            for i, task in enumerate(tasks):
                query = (request.queries[i] or "").strip()
                category = (request.categories[i] or "").strip()
                if task in pending or task.cancelled():
                    outcomes.append(
                        settled.get(i)
                        or ItemOutcome(i, query, category, ItemStatus.FAILED, DEADLINE_EXCEEDED)
                    )
                elif task.exception() is not None:
                    exc = task.exception()
                    logger.error(
                        "Unexpected error for item %d ('%s'): %s: %s",
                        i,
                        query,
                        type(exc).__name__,
                        exc,
                    )
                    outcomes.append(
                        ItemOutcome(i, query, category, ItemStatus.FAILED, str(exc))
                    )
                else:
                    outcomes.append(task.result())

        outcome = BatchOutcome(results=results.snapshot(), items=outcomes)
        logger.info(
            "Batch summary: %d items, %d succeeded, %d empty, %d skipped, %d failed",
            len(outcomes),
            outcome.count(ItemStatus.SUCCEEDED),
            outcome.count(ItemStatus.EMPTY),
            outcome.count(ItemStatus.SKIPPED),
            outcome.count(ItemStatus.FAILED),
        )
        return outcome

    async def _process_item(
        self,
        index: int,
        raw_query: str,
        raw_category: str,
        semaphore: asyncio.Semaphore,
        results: ResultMap,
        settled: Dict[int, ItemOutcome],
    ) -> ItemOutcome:
        query = (raw_query or "").strip()
        category = (raw_category or "").strip()

        if not query:
            return ItemOutcome(index, query, category, ItemStatus.SKIPPED, "empty query")

        route = self.router.resolve(category)
        if route is None:
            logger.debug("Skipping '%s': category '%s' is not routable", query, category)
            return ItemOutcome(
                index, query, category, ItemStatus.SKIPPED, "unroutable category"
            )

        async with semaphore:
            await self.throttle.before_attempt()
            try:
                outcome = await self._search_item(index, query, category, route, results)
                settled[index] = outcome
            finally:
                await self.throttle.after_attempt()
        return outcome

    async def _search_item(
        self,
        index: int,
        query: str,
        category: str,
        route: RouteConfig,
        results: ResultMap,
    ) -> ItemOutcome:
        """Run one search and record it; the result is in the map on return."""
        try:
            urls = await self.search_client.search(
                self.embellish(query), route, self.result_limit
            )
        except SearchError as e:
            logger.warning("Search failed for '%s' (%s): %s", query, category, e.message)
            return ItemOutcome(index, query, category, ItemStatus.FAILED, e.message)

        results.record(query, urls)
        status = ItemStatus.SUCCEEDED if urls else ItemStatus.EMPTY
        return ItemOutcome(index, query, category, status, count=len(urls))

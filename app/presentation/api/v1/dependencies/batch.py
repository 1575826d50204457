from fastapi import Request

from app.application.interfaces import ISearchAdapters
from app.application.search import SearchClient
from app.application.use_cases.batch_search import BatchSearchUseCase
from app.core.config import settings


def build_batch_search_use_case(adapters: ISearchAdapters) -> BatchSearchUseCase:
    """Compose the BatchSearchUseCase from the adapters container."""
    client = SearchClient(adapters.provider, adapters.credential_pool)
    return BatchSearchUseCase(
        client,
        adapters.category_router,
        adapters.throttle,
        max_concurrency=settings.batch_max_concurrency,
        result_limit=settings.search_result_limit,
        query_hint=settings.search_query_hint,
        batch_timeout=settings.batch_timeout,
    )


def get_search_adapters(request: Request) -> ISearchAdapters:
    return request.app.state.search_adapters


def get_batch_search_use_case(request: Request) -> BatchSearchUseCase:
    """Use case bound to the adapters created at application startup."""
    return build_batch_search_use_case(get_search_adapters(request))

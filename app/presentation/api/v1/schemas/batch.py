from typing import Dict, List, Optional

from pydantic import BaseModel

from app.application.models import ItemStatus


class BatchSearchRequest(BaseModel):
    queries: List[str]
    # Omitted entirely in the category-less variant
    categories: Optional[List[str]] = None


class ItemOutcomeResponse(BaseModel):
    index: int
    query: str
    category: str
    status: ItemStatus
    reason: Optional[str] = None
    count: int = 0


class BatchDiagnosticsResponse(BaseModel):
    results: Dict[str, List[str]]
    items: List[ItemOutcomeResponse]

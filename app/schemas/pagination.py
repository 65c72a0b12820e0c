import math
from typing import Generic, TypeVar
from dataclasses import dataclass
from fastapi import Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")

MAX_PAGE_SIZE = 50
MAX_PAGE = 2**31 - 1


@dataclass(frozen=True)
class PageParams:
    """Validated page/limit query values"""

    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(default_limit: int = 10):
    """
    Build a FastAPI dependency reading ?page=&limit= with a per-endpoint
    default limit.
    """

    def dependency(
        page: int = Query(1, ge=1, le=MAX_PAGE, description="Page number"),
        limit: int = Query(
            default_limit, ge=1, le=MAX_PAGE_SIZE, description="Number of items per page"
        ),
    ) -> PageParams:
        return PageParams(page=page, limit=limit)

    return dependency


class PageMeta(BaseModel):
    """Pagination metadata, serialized with camelCase keys"""

    total_items: int
    item_count: int
    items_per_page: int
    total_pages: int
    current_page: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Page(BaseModel, Generic[T]):
    """Paginated response envelope"""

    items: list[T]
    meta: PageMeta


def build_meta(total_items: int, item_count: int, params: PageParams) -> PageMeta:
    return PageMeta(
        total_items=total_items,
        item_count=item_count,
        items_per_page=params.limit,
        total_pages=math.ceil(total_items / params.limit),
        current_page=params.page,
    )


def paginate(items: list, total_items: int, params: PageParams, schema: type[BaseModel]) -> dict:
    """
    Shape a page of ORM objects into the {items, meta} envelope.

    Args:
        items: ORM objects of the current page
        total_items: Total count across all pages
        params: Page parameters used for the query
        schema: Response schema each item is validated into

    Returns:
        Dict matching Page[schema]
    """
    return {
        "items": [schema.model_validate(item) for item in items],
        "meta": build_meta(total_items, len(items), params),
    }

"""Page/search/filter state shared by the list screens."""
from dataclasses import dataclass, field, replace
from urllib.parse import urlencode

from workshop_web.config import settings


@dataclass(frozen=True)
class ListQuery:
    """What a list screen asks the backend for.

    Built fresh from each request's query string. The filter forms submit
    search and filters without ``page``, so changing either starts over at
    page 1; only pager links carry a page number.
    """

    page: int = 1
    search: str = ""
    filters: dict[str, str] = field(default_factory=dict)
    limit: int = field(default_factory=lambda: settings.PAGE_SIZE)

    @classmethod
    def from_request(cls, page: int | None = None, search: str | None = None, **filters: str | None) -> "ListQuery":
        return cls(
            page=max(page or 1, 1),
            search=(search or "").strip(),
            filters={key: value for key, value in filters.items() if value},
        )

    def with_page(self, page: int) -> "ListQuery":
        return replace(self, page=max(page, 1))

    def filter_value(self, key: str) -> str:
        return self.filters.get(key, "")

    def to_params(self) -> dict[str, str | int]:
        """Backend query parameters; empty search and filters are omitted."""
        params: dict[str, str | int] = {"page": self.page, "limit": self.limit}
        if self.search:
            params["search"] = self.search
        for key, value in self.filters.items():
            if value:
                params[f"filters[{key}]"] = value
        return params

    def url_params(self) -> dict[str, str | int]:
        """This page's own query string values, as the screens read them back."""
        params: dict[str, str | int] = {"page": self.page}
        if self.search:
            params["search"] = self.search
        params.update(self.filters)
        return params

    def url_for_page(self, page: int) -> str:
        """Query string for a pager link, keeping search and filters."""
        return "?" + urlencode(self.with_page(page).url_params())


@dataclass(frozen=True)
class PageView:
    """One fetched page as the templates render it."""

    items: list
    query: ListQuery
    total_pages: int = 1
    total_data: int = 0

    @property
    def has_prev(self) -> bool:
        return self.query.page > 1

    @property
    def has_next(self) -> bool:
        return self.query.page < self.total_pages

    @property
    def page_numbers(self) -> range:
        return range(1, self.total_pages + 1)

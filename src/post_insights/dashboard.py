from __future__ import annotations
import logging
from typing import List, Optional

from post_insights.data_prep import InvalidInputError, PostRecord, parse_posts
from post_insights.metrics import (
    ALL_TYPES, PostSummary, TypeAggregate, aggregate_by_type, filter_and_sort, summarize, top_performers,
)

logger = logging.getLogger(__name__)


class DashboardState:
    """
    What a display holds between user actions: the loaded batch, the
    current filter and sort, and the selected post. The batch itself is
    never modified; every upload replaces it.
    """

    def __init__(self, type_filter: str = ALL_TYPES, sort_key: str = "engagement"):
        self.posts: Optional[List[PostRecord]] = None
        self.type_filter = type_filter
        self.sort_key = sort_key
        self.selected: Optional[PostRecord] = None

    @property
    def loaded(self) -> bool:
        return self.posts is not None

    def load_text(self, raw_text: str) -> List[PostRecord]:
        try:
            posts = parse_posts(raw_text)
        except InvalidInputError:
            logger.warning("Upload rejected; returning to the upload screen")
            self.reset()
            raise
        self.posts = posts
        self.selected = None
        return posts

    def reset(self) -> None:
        self.posts = None
        self.selected = None

    def summary(self) -> Optional[PostSummary]:
        if not self.posts:
            return None
        return summarize(self.posts)

    def visible_posts(self, limit: Optional[int] = None) -> List[PostRecord]:
        if not self.posts:
            return []
        rows = filter_and_sort(self.posts, self.type_filter, self.sort_key)
        return rows if limit is None else rows[:limit]

    def by_type(self) -> List[TypeAggregate]:
        return aggregate_by_type(self.posts or [])

    def top(self, n: int = 10) -> List[PostRecord]:
        return top_performers(self.posts or [], n)

    def select(self, index: int) -> PostRecord:
        """Select a row of the current visible table."""
        rows = self.visible_posts()
        if not 0 <= index < len(rows):
            raise IndexError(f"row {index} is outside the table (0..{len(rows) - 1})")
        self.selected = rows[index]
        return self.selected

    def clear_selection(self) -> None:
        self.selected = None

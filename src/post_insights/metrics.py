from __future__ import annotations
from dataclasses import dataclass
from typing import List, Sequence
import numpy as np
import pandas as pd

from post_insights.data_prep import PostRecord, format_rate

ALL_TYPES = "all"

# sort key -> posts_frame column
SORT_COLUMNS = {
    "engagement": "engagement",
    "reach": "reach",
    "engagement_rate": "engagement_rate",
    "engagementRate": "engagement_rate",
}

FRAME_COLUMNS = ["position", "content_type", "caption", "likes", "comments", "shares",
                 "saves", "reach", "impressions", "engagement", "engagement_rate"]


@dataclass(frozen=True)
class PostSummary:
    total_posts: int
    total_likes: int
    total_comments: int
    total_shares: int
    total_reach: int
    total_engagement: int
    avg_engagement_rate: str

    @property
    def total_interactions(self) -> int:
        return self.total_likes + self.total_comments


@dataclass(frozen=True)
class TypeAggregate:
    content_type: str
    engagement: int
    count: int
    avg_engagement: int


def posts_frame(records: Sequence[PostRecord]) -> pd.DataFrame:
    """One row per record; `position` is the record's index in the batch."""
    rows = [{
        "position": i,
        "content_type": r.content_type,
        "caption": r.caption,
        "likes": r.likes,
        "comments": r.comments,
        "shares": r.shares,
        "saves": r.saves,
        "reach": r.reach,
        "impressions": r.impressions,
        "engagement": r.engagement,
        "engagement_rate": r.engagement_rate_value,
    } for i, r in enumerate(records)]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)

def _rank(records: Sequence[PostRecord], df: pd.DataFrame, column: str) -> List[PostRecord]:
    # position as secondary key keeps ties in upload order
    ranked = df.sort_values([column, "position"], ascending=[False, True])
    return [records[i] for i in ranked["position"].tolist()]


def summarize(records: Sequence[PostRecord]) -> PostSummary:
    if len(records) == 0:
        raise ValueError("Cannot summarize an empty batch; upload a CSV with data rows first.")
    df = posts_frame(records)
    return PostSummary(
        total_posts=len(df),
        total_likes=int(df["likes"].sum()),
        total_comments=int(df["comments"].sum()),
        total_shares=int(df["shares"].sum()),
        total_reach=int(df["reach"].sum()),
        total_engagement=int(df["engagement"].sum()),
        avg_engagement_rate=format_rate(float(df["engagement_rate"].mean())),
    )

def filter_and_sort(
    records: Sequence[PostRecord],
    type_filter: str = ALL_TYPES,
    sort_key: str = "engagement",
) -> List[PostRecord]:
    """
    Keep posts whose content type matches `type_filter` (case-insensitive,
    "all" keeps everything) and order them highest first by `sort_key`.
    """
    if sort_key not in SORT_COLUMNS:
        raise ValueError(f"Unknown sort key {sort_key!r}; expected one of {sorted(SORT_COLUMNS)}")
    df = posts_frame(records)
    wanted = (type_filter or ALL_TYPES).lower()
    if wanted != ALL_TYPES:
        df = df[df["content_type"].str.lower() == wanted]
    return _rank(records, df, SORT_COLUMNS[sort_key])

def aggregate_by_type(records: Sequence[PostRecord]) -> List[TypeAggregate]:
    """Engagement totals per content type, in order of first appearance."""
    df = posts_frame(records)
    if df.empty:
        return []
    agg = df.groupby("content_type", sort=False).agg(
        engagement=("engagement", "sum"),
        count=("position", "size"),
    ).reset_index()
    # half-up rounding, not banker's
    agg["avg_engagement"] = np.floor(agg["engagement"] / agg["count"] + 0.5).astype(int)
    return [
        TypeAggregate(
            content_type=row["content_type"],
            engagement=int(row["engagement"]),
            count=int(row["count"]),
            avg_engagement=int(row["avg_engagement"]),
        )
        for row in agg.to_dict("records")
    ]

def top_performers(records: Sequence[PostRecord], n: int = 10) -> List[PostRecord]:
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    return _rank(records, posts_frame(records), "engagement")[:n]

from __future__ import annotations
import os
from typing import Dict, List, Optional, Sequence, Tuple
import pandas as pd
import matplotlib.pyplot as plt

from post_insights.data_prep import PostRecord
from post_insights.metrics import PostSummary, TypeAggregate, top_performers

TYPE_COLOR = "#E1306C"
TOP_COLOR = "#833AB4"

def _ensure_dir(p: Optional[str]) -> None:
    if p:
        d = os.path.dirname(p)
        if d and not os.path.exists(d):
            os.makedirs(d, exist_ok=True)

def _finish(fig: plt.Figure, out_path: Optional[str], show: bool) -> Optional[str]:
    fig.tight_layout()
    saved = None
    if out_path:
        _ensure_dir(out_path)
        fig.savefig(out_path, dpi=150, bbox_inches="tight")
        saved = out_path
    if show:
        plt.show()
    else:
        plt.close(fig)
    return saved

def short_caption(caption: str, width: int = 30) -> str:
    return (caption or "")[:width] + "..."


# ----------------------------
# Tables
# ----------------------------
def summary_cards(summary: PostSummary) -> List[Tuple[str, str, str]]:
    """(title, value, subtitle) for the four headline cards."""
    return [
        ("Total Engagement", f"{summary.total_engagement:,}", f"{summary.total_posts} posts"),
        ("Total Reach", f"{summary.total_reach:,}", "Unique accounts"),
        ("Avg Engagement Rate", f"{summary.avg_engagement_rate}%", "Per post"),
        ("Total Interactions", f"{summary.total_interactions:,}", "Likes + Comments"),
    ]

def engagement_by_type_table(aggregates: Sequence[TypeAggregate]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"type": a.content_type, "engagement": a.engagement, "count": a.count,
          "avg_engagement": a.avg_engagement} for a in aggregates],
        columns=["type", "engagement", "count", "avg_engagement"],
    )

def top_performers_table(records: Sequence[PostRecord], top_n: int = 10) -> pd.DataFrame:
    return pd.DataFrame(
        [{"caption": short_caption(r.caption), "engagement": r.engagement, "reach": r.reach,
          "engagement_rate": r.engagement_rate_value} for r in top_performers(records, top_n)],
        columns=["caption", "engagement", "reach", "engagement_rate"],
    )

def post_details_table(records: Sequence[PostRecord], limit: int = 10) -> pd.DataFrame:
    """
    Rows for the post performance table. `records` should already be
    filtered and sorted; only the first `limit` are shown.
    """
    return pd.DataFrame(
        [{"Caption": r.caption, "Type": r.content_type, "Reach": f"{r.reach:,}",
          "Engagement": f"{r.engagement:,}", "Rate": f"{r.engagement_rate}%"}
         for r in list(records)[:limit]],
        columns=["Caption", "Type", "Reach", "Engagement", "Rate"],
    )

def post_detail(record: PostRecord) -> Dict[str, str]:
    return {
        "Caption": record.caption,
        "Type": record.content_type,
        "Likes": f"{record.likes:,}",
        "Comments": f"{record.comments:,}",
        "Shares": f"{record.shares:,}",
        "Reach": f"{record.reach:,}",
        "Engagement Rate": f"{record.engagement_rate}%",
    }


# ----------------------------
# Charts
# ----------------------------
def plot_engagement_by_type(
    aggregates: Sequence[TypeAggregate],
    out_path: Optional[str] = None,
    show: bool = False,
) -> Tuple[plt.Figure, plt.Axes, Optional[str]]:
    """Average engagement per content type, one bar per type."""
    table = engagement_by_type_table(aggregates)
    fig, ax = plt.subplots(figsize=(8, 4.5))
    ax.bar(table["type"].tolist(), table["avg_engagement"].tolist(),
           color=TYPE_COLOR, label="Avg Engagement")
    ax.set_title("Performance by Content Type")
    ax.set_ylabel("Avg engagement")
    ax.grid(axis="y", linestyle="--", alpha=0.4)
    ax.legend()
    return fig, ax, _finish(fig, out_path, show)

def plot_top_performers(
    records: Sequence[PostRecord],
    out_path: Optional[str] = None,
    show: bool = False,
    *,
    top_n: int = 5,
) -> Tuple[plt.Figure, plt.Axes, Optional[str]]:
    """Horizontal bars for the top posts by engagement, best at the top."""
    table = top_performers_table(records, top_n)
    fig, ax = plt.subplots(figsize=(8, 4.5))
    # numeric slots so repeated captions keep separate bars; barh draws bottom-up
    ypos = list(range(len(table)))
    ax.barh(ypos, table["engagement"].tolist()[::-1], color=TOP_COLOR, label="Engagement")
    ax.set_yticks(ypos)
    ax.set_yticklabels(table["caption"].tolist()[::-1])
    ax.set_title("Top Performing Posts")
    ax.set_xlabel("Engagement")
    ax.grid(axis="x", linestyle="--", alpha=0.4)
    ax.legend()
    return fig, ax, _finish(fig, out_path, show)

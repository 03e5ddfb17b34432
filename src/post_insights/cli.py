"""
Command-line interface for post-insights.

Each command reads one exported CSV, parses it into post records and
prints (or plots) one view of the batch.
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from post_insights.config import get_settings
from post_insights.data_prep import InvalidInputError, PostRecord, parse_posts, read_upload
from post_insights.log import setup_logging
from post_insights.metrics import ALL_TYPES, aggregate_by_type, filter_and_sort, summarize, top_performers
from post_insights.viz import plot_engagement_by_type, plot_top_performers, post_details_table, summary_cards

app = typer.Typer(
    name="post-insights",
    help="Engagement summaries and charts for social-media post exports",
    add_completion=False,
)
console = Console()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override POST_INSIGHTS_LOG_LEVEL"),
):
    try:
        setup_logging(log_level)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def _load(path: Path) -> List[PostRecord]:
    try:
        return parse_posts(read_upload(str(path)))
    except InvalidInputError as e:
        console.print(f"[red]✗ {escape(str(path))}: {escape(str(e))}[/red]", soft_wrap=True)
        raise typer.Exit(1)


def _posts_table(title: str, posts: List[PostRecord]) -> Table:
    table = Table(title=title)
    for col, justify in [("Caption", "left"), ("Type", "left"), ("Reach", "right"),
                         ("Engagement", "right"), ("Rate", "right")]:
        table.add_column(col, justify=justify, overflow="ellipsis", max_width=40 if col == "Caption" else None)
    for row in post_details_table(posts, limit=len(posts)).to_dict("records"):
        table.add_row(*[str(row[c]) for c in ["Caption", "Type", "Reach", "Engagement", "Rate"]])
    return table


@app.command()
def summary(path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Exported CSV")):
    """Headline totals for the whole upload."""
    posts = _load(path)
    table = Table(title="Campaign Analytics")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_column("")
    for title, value, sub in summary_cards(summarize(posts)):
        table.add_row(title, value, sub)
    console.print(table)


@app.command()
def posts(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Exported CSV"),
    type_filter: str = typer.Option(ALL_TYPES, "--type", "-t", help="Content type, or 'all'"),
    sort_key: str = typer.Option("engagement", "--sort", "-s", help="engagement, reach or engagement_rate"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=0, help="Rows to show"),
):
    """Post performance table, filtered and sorted."""
    records = _load(path)
    try:
        rows = filter_and_sort(records, type_filter, sort_key)
    except ValueError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]", soft_wrap=True)
        raise typer.Exit(2)
    limit = get_settings().table_rows if limit is None else limit
    console.print(_posts_table(f"Post Performance Details ({len(rows)} posts)", rows[:limit]))


@app.command("by-type")
def by_type(path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Exported CSV")):
    """Engagement per content type."""
    table = Table(title="Performance by Content Type")
    for col in ["Type", "Posts", "Engagement", "Avg Engagement"]:
        table.add_column(col, justify="left" if col == "Type" else "right")
    for agg in aggregate_by_type(_load(path)):
        table.add_row(agg.content_type, str(agg.count), f"{agg.engagement:,}", f"{agg.avg_engagement:,}")
    console.print(table)


@app.command()
def top(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Exported CSV"),
    n: Optional[int] = typer.Option(None, "--top", "-n", min=0, help="How many posts"),
):
    """Top posts by engagement."""
    n = get_settings().top_n if n is None else n
    console.print(_posts_table(f"Top {n} Performing Posts", top_performers(_load(path), n)))


@app.command()
def charts(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Exported CSV"),
    out_dir: Optional[Path] = typer.Option(None, "--out-dir", "-o", help="Where to write PNGs"),
):
    """Save the content-type and top-posts charts as PNGs."""
    settings = get_settings()
    out_dir = out_dir or settings.output_dir
    records = _load(path)
    _, _, by_type_png = plot_engagement_by_type(
        aggregate_by_type(records), out_path=str(out_dir / "engagement_by_type.png"))
    _, _, top_png = plot_top_performers(
        records, out_path=str(out_dir / "top_posts.png"), top_n=settings.chart_top_n)
    for p in (by_type_png, top_png):
        console.print(f"[green]✓[/green] {p}")


if __name__ == "__main__":
    app()

from __future__ import annotations
import logging, re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional

logger = logging.getLogger(__name__)

ZERO_RATE = "0"
UNKNOWN_TYPE = "Unknown"
NO_CAPTION = "No caption"

COUNT_COLUMNS = ["likes", "comments", "shares", "saves", "reach", "impressions"]
TYPE_COLUMNS = ["media_type", "type"]
CAPTION_COLUMNS = ["caption", "Caption"]

_EDGE_QUOTES = re.compile(r"^[\"']|[\"']$")
_INT_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")


class InvalidInputError(ValueError):
    """Raised when an upload has no header or no data rows."""


# ----------------------------
# Field helpers
# ----------------------------
def coerce_integer(value: Optional[str]) -> int:
    """
    Grouping commas are dropped and the leading base-10 digits are read
    ("1,234" -> 1234, "12.7" -> 12). Anything unparsable degrades to 0.
    """
    if not value:
        return 0
    m = _INT_PREFIX.match(str(value).replace(",", ""))
    return int(m.group(1)) if m else 0

def format_rate(value: float) -> str:
    return f"{value:.2f}"

def _clean(token: str) -> str:
    return _EDGE_QUOTES.sub("", token.strip())

def parse_header(line: str) -> List[str]:
    return [_clean(h) for h in line.split(",")]

def split_row(line: str) -> List[str]:
    """
    Split one data line on commas outside double quotes.
    An unterminated quote swallows the remaining commas of the line.
    """
    values, cur, in_quotes = [], [], False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            values.append(_clean("".join(cur)))
            cur = []
        else:
            cur.append(ch)
    values.append(_clean("".join(cur)))
    return values

def _first_present(raw: Mapping[str, str], columns: List[str]) -> str:
    for c in columns:
        if raw.get(c):
            return raw[c]
    return ""


# ----------------------------
# Records
# ----------------------------
@dataclass(frozen=True)
class PostRecord:
    """One parsed post. Engagement fields are derived from the counts on access."""
    raw_fields: Mapping[str, str] = field(repr=False, hash=False)
    likes: int = 0
    comments: int = 0
    shares: int = 0
    saves: int = 0
    reach: int = 0
    impressions: int = 0
    content_type: str = UNKNOWN_TYPE
    caption: str = NO_CAPTION

    @classmethod
    def from_raw(cls, raw: Mapping[str, str]) -> "PostRecord":
        counts = {c: coerce_integer(raw.get(c)) for c in COUNT_COLUMNS}
        ctype = _first_present(raw, TYPE_COLUMNS) or UNKNOWN_TYPE
        return cls(
            raw_fields=MappingProxyType(dict(raw)),
            content_type=ctype[:1].upper() + ctype[1:],
            caption=_first_present(raw, CAPTION_COLUMNS) or NO_CAPTION,
            **counts,
        )

    @property
    def engagement(self) -> int:
        return self.likes + self.comments + self.shares + self.saves

    @property
    def engagement_rate(self) -> str:
        if self.reach > 0:
            return format_rate(self.engagement / self.reach * 100)
        return ZERO_RATE

    @property
    def engagement_rate_value(self) -> float:
        return float(self.engagement_rate)


# ----------------------------
# Public entrypoints
# ----------------------------
def parse_posts(raw_text: str) -> List[PostRecord]:
    """
    Parse one uploaded CSV blob into post records, in input order.

    The first non-blank line is the header. Short rows are padded with ""
    and surplus values are dropped. Raises InvalidInputError when there is
    no header or no data row.
    """
    raw_text = raw_text or ""
    if raw_text.startswith("\ufeff"):
        raw_text = raw_text[1:]
    lines = [ln for ln in raw_text.split("\n") if ln.strip()]
    if len(lines) < 2:
        raise InvalidInputError("CSV file appears to be empty or invalid")

    headers = parse_header(lines[0])
    logger.debug("CSV headers: %s", headers)

    posts = []
    for line in lines[1:]:
        values = split_row(line)
        raw = {h: (values[i] if i < len(values) else "") for i, h in enumerate(headers)}
        posts.append(PostRecord.from_raw(raw))

    logger.info("Parsed %d posts (%d columns)", len(posts), len(headers))
    return posts

def read_upload(path: str) -> str:
    # utf-8-sig drops an Excel BOM so the first header stays clean
    with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
        return f.read()

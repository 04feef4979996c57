"""Text formatting helpers shared by the tools.

Provider responses embed HTML highlight tags (`<b>`) in titles and
descriptions, and amounts are shown to users in Korean won with thousands
separators. These helpers keep that formatting in one place.
"""

import re
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Optional, Union

_TAG_RE = re.compile(r"<[^>]*>")


def strip_html(text: Optional[str]) -> str:
    """Remove HTML tags from a provider string."""
    if not text:
        return ""
    return _TAG_RE.sub("", text)


def format_won(amount: Union[int, float]) -> str:
    """Format an amount as `12,345원`."""
    return f"{int(round(amount)):,}원"


def format_minutes(total_minutes: int) -> str:
    """Render minutes as `1시간 5분` or `45분`."""
    hours, minutes = divmod(max(0, int(total_minutes)), 60)
    if hours > 0:
        return f"{hours}시간 {minutes}분"
    return f"{minutes}분"


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse a leading integer like JavaScript's parseInt; None when absent."""
    if value is None:
        return None
    match = re.match(r"\s*([+-]?\d+)", str(value))
    if not match:
        return None
    return int(match.group(1))


def format_ko_date(value: Optional[str]) -> str:
    """Render a provider date as `2024. 1. 15.`.

    Accepts Naver blog `YYYYMMDD` post dates and RFC 822 news dates;
    anything else is returned unchanged.
    """
    if not value:
        return "N/A"
    text = value.strip()
    if re.fullmatch(r"\d{8}", text):
        try:
            parsed = datetime.strptime(text, "%Y%m%d")
        except ValueError:
            return text
    else:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError):
            return text
        if parsed is None:
            return text
    return f"{parsed.year}. {parsed.month}. {parsed.day}."

"""
agent/nodes/intent.py

Intent node: extracts topic, year and region from the latest user message
using deterministic keyword rules. No LLM, no network.
"""

import re
from typing import Optional, Tuple

from agent.state import ChatState
from aggregation.urban_rural import fold_text


# ---------------------------------------------------------------------------
# Keyword maps
# ---------------------------------------------------------------------------

# Checked in order; the first topic with a hit wins.
TOPIC_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("internet", ("internet", "mạng", "kết nối", "network", "connectivity")),
    ("urban_rural", ("thành thị", "đô thị", "nông thôn", "urban", "rural")),
)
DEFAULT_TOPIC = "population"

# (province code, display name, aliases)
PROVINCES: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("01", "Hà Nội", ("hà nội", "ha noi", "hanoi", "hn")),
    ("79", "Hồ Chí Minh", ("hồ chí minh", "ho chi minh", "hcm", "sài gòn", "sai gon")),
    ("48", "Đà Nẵng", ("đà nẵng", "da nang", "danang")),
    ("31", "Hải Phòng", ("hải phòng", "hai phong", "haiphong")),
    ("92", "Cần Thơ", ("cần thơ", "can tho", "cantho")),
)

MIN_YEAR = 2000
MAX_YEAR = 2100

_YEAR_TOKEN = re.compile(r"(?<!\d)(\d{4})(?!\d)")


def _alias_pattern(alias: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![a-z0-9]){re.escape(fold_text(alias))}(?![a-z0-9])")


_PROVINCE_PATTERNS: tuple[tuple[str, str, tuple[re.Pattern[str], ...]], ...] = tuple(
    (code, name, tuple(_alias_pattern(alias) for alias in aliases))
    for code, name, aliases in PROVINCES
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def detect_topic(text: str) -> str:
    """Return ``internet``, ``urban_rural`` or the default ``population``."""
    lowered = text.lower()
    for topic, keywords in TOPIC_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return topic
    return DEFAULT_TOPIC


def detect_province(text: str) -> Optional[Tuple[str, str]]:
    """
    Match diacritic-stripped, case-folded aliases against the known regions.

    Aliases match whole words only, so short forms such as ``hn`` do not
    fire inside longer words. First match wins; ``None`` means nationwide.
    """
    folded = fold_text(text)
    for code, name, patterns in _PROVINCE_PATTERNS:
        if any(pattern.search(folded) for pattern in patterns):
            return code, name
    return None


def detect_year(text: str, default_year: int) -> int:
    """First 4-digit token within [2000, 2100], else *default_year*."""
    for match in _YEAR_TOKEN.finditer(text):
        year = int(match.group(1))
        if MIN_YEAR <= year <= MAX_YEAR:
            return year
    return default_year


def latest_user_message(state: ChatState) -> str:
    for message in reversed(state.get("messages") or ()):
        if message.role == "user":
            return message.content
    return ""


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------

def intent_node(state: ChatState) -> ChatState:
    """
    LangGraph node: populate question, topic, year and region.

    All other state fields are left untouched.
    """
    question = latest_user_message(state)

    return {
        **state,
        "question": question,
        "topic": detect_topic(question),
        "year": detect_year(question, state["default_year"]),
        "region": detect_province(question),
    }

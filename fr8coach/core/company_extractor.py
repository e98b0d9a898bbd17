"""Heuristic company-name extraction from coaching questions.

An ordered list of ``ExtractionRule`` objects is evaluated against the
current question, then against prior turns (newest first, rep turns before
assistant turns). The first rule that yields a non-empty normalized name
wins; there is no scoring across candidates.

Known limitation: a sentence with several "at X" spans only ever yields the
first span the first matching rule sees, e.g. "move freight from Chicago at
Acme to Dallas at Beta" returns "Acme".
"""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from fr8coach.core.schemas_coach import ConversationTurn

# Standalone words that end a captured company span
STOP_WORDS = ("to", "for", "about", "regarding", "in", "on")

MAX_COMPANY_WORDS = 6

# Lowercased short name -> canonical legal name.
# Canonical names must survive normalize_company unchanged.
COMPANY_ALIASES: dict[str, str] = {
    "walmart": "Walmart Inc",
    "wal-mart": "Walmart Inc",
    "target": "Target Corporation",
    "amazon": "Amazon.com Inc",
    "costco": "Costco Wholesale Corporation",
    "home depot": "The Home Depot Inc",
    "the home depot": "The Home Depot Inc",
    "lowes": "Lowe's Companies Inc",
    "lowe's": "Lowe's Companies Inc",
    "pepsi": "PepsiCo Inc",
    "kroger": "The Kroger Co",
}

_STOP_RE = re.compile(r"\s+\b(?:" + "|".join(STOP_WORDS) + r")\b.*$", re.IGNORECASE | re.DOTALL)
_LEADING_CONNECTOR_RE = re.compile(
    r"^(?:(?:a|an|the)\s+)?(?:company|shipper|customer|account|prospect|brand)\s+"
    r"(?:called|named)\s+",
    re.IGNORECASE,
)
_TRAILING_PUNCT = " \t\r\n.,;:!?\"')]}"
_LEADING_PUNCT = " \"'(["


def _normalize_pass(text: str) -> str:
    text = " ".join(text.split()).lstrip(_LEADING_PUNCT)
    text = _LEADING_CONNECTOR_RE.sub("", text)
    text = _STOP_RE.sub("", text)
    text = " ".join(text.split()[:MAX_COMPANY_WORDS])
    text = text.rstrip(_TRAILING_PUNCT).lstrip(_LEADING_PUNCT)
    if not text:
        return ""
    return COMPANY_ALIASES.get(text.lower(), text)


def normalize_company(raw: str) -> str:
    """
    Normalize a captured span into a company candidate.

    Strips quotes and leading connector phrases, truncates at the first
    standalone stop word, trims trailing punctuation and maps known short
    names to their canonical names. Passes repeat until the text stops
    changing, so the result is idempotent.

    Args:
        raw: Raw captured text

    Returns:
        Normalized name, or an empty string if nothing usable remains
    """
    text = raw
    while True:
        normalized = _normalize_pass(text)
        # Every non-alias change shortens the text; canonical names are fixed points
        if normalized == text:
            return normalized
        text = normalized


@dataclass(frozen=True)
class ExtractionRule:
    """One pattern -> normalizer pair. The pattern must define group ``company``."""

    name: str
    pattern: re.Pattern[str]
    normalizer: Callable[[str], str] = normalize_company

    def apply(self, text: str) -> str | None:
        match = self.pattern.search(text)
        if not match:
            return None
        return self.normalizer(match.group("company")) or None


_SPAN = r"(?P<company>[^?!\n.,;]+(?:\.[A-Za-z]{2,}[^?!\n.,;]*)?)"

DEFAULT_RULES: tuple[ExtractionRule, ...] = (
    ExtractionRule(
        name="who_to_contact",
        pattern=re.compile(
            r"\bwho\s+(?:should|do|can|could|would)\s+(?:i|we)\s+"
            r"(?:contact|reach\s+out\s+to|call|email|talk\s+to|target)\s+"
            r"(?:at|with|from|over\s+at)\s+" + _SPAN,
            re.IGNORECASE,
        ),
    ),
    ExtractionRule(
        name="contacts_at",
        pattern=re.compile(
            r"\b(?:contacts?|decision[\s-]makers?|buyers?|people)\s+(?:at|for|with|from)\s+" + _SPAN,
            re.IGNORECASE,
        ),
    ),
    ExtractionRule(
        name="generic_at",
        # Case-sensitive: only capitalized spans, so "at the moment" never matches
        pattern=re.compile(
            r"\bat\s+(?P<company>(?:The\s+)?[A-Z][\w&'.-]*(?:\s+(?:&\s+)?[A-Z0-9][\w&'.-]*)*)"
        ),
    ),
)


def _extract_from_text(text: str, rules: Sequence[ExtractionRule]) -> str | None:
    for rule in rules:
        candidate = rule.apply(text)
        if candidate:
            return candidate
    return None


def extract_company(
    current_text: str,
    history: Sequence[ConversationTurn] = (),
    rules: Sequence[ExtractionRule] = DEFAULT_RULES,
) -> str | None:
    """
    Find the company the rep is asking about.

    Args:
        current_text: The rep's current question
        history: Prior turns in chronological order
        rules: Ordered extraction rules (first match wins)

    Returns:
        Normalized company candidate or None
    """
    candidate = _extract_from_text(current_text or "", rules)
    if candidate:
        return candidate

    newest_first = list(reversed(history))
    rep_turns = [t for t in newest_first if t.role != "assistant"]
    assistant_turns = [t for t in newest_first if t.role == "assistant"]

    for turn in rep_turns + assistant_turns:
        candidate = _extract_from_text(turn.content or "", rules)
        if candidate:
            return candidate

    return None

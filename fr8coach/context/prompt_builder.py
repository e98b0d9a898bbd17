"""Build the coaching system instruction and message list.

Notes are rendered as ``[1]``, ``[2]``, ... in exactly the order returned by
``ContextBundle.surfaced_notes()``; the model is told to cite by those
indices, so rendering order and numbering must never diverge.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from fr8coach.core.config import Settings
from fr8coach.core.schemas_coach import ContactRecord, ContextBundle, ConversationTurn

PERSONA = (
    "You are Fr8Coach, a veteran freight brokerage coach for sales reps and "
    "carrier/operations reps. Give direct, practical, step-by-step guidance "
    "a rep can act on today. Prefer short paragraphs and numbered steps. Be "
    "honest about uncertainty and never invent rates, regulations or contact "
    "details."
)

APPROVED_SOURCES: tuple[str, ...] = (
    "Internal coaching notes provided below (cite as [n])",
    "FMCSA (fmcsa.dot.gov) for carrier authority, safety and compliance",
    "DAT and Truckstop market data for spot and contract rate trends",
    "FreightWaves SONAR and news for market conditions",
    "TIA (Transportation Intermediaries Association) best practices",
    "Shipper-published routing guides and carrier requirements",
)

CITATION_RULES = (
    "When a numbered note supports a point, cite it inline as [n]. Only cite "
    "numbers that appear in the Knowledge notes section. Do not cite sources "
    "outside the approved list."
)


@dataclass(frozen=True)
class CoachPrompt:
    """System instruction plus the full chat message sequence."""

    system_instruction: str
    messages: list[dict[str, str]]


def _truncate(text: str, max_chars: int) -> str:
    text = (text or "").strip()
    if len(text) <= max_chars:
        return text
    return text[:max_chars].rstrip() + "…"


def format_contacts_block(company: str | None, contacts: Sequence[ContactRecord]) -> str:
    """Render contacts as a plain-text block, or "" when there are none."""
    if not contacts:
        return ""
    header = f"Possible contacts at {company}:" if company else "Possible contacts:"
    lines = [header]
    for contact in contacts:
        lines.append(f"- {contact.title or 'Profile'}: {contact.profile_url}")
    return "\n".join(lines)


def tenant_label(user_email: str | None, labels: dict[str, str]) -> str | None:
    """Look up the rep's brokerage from their email domain."""
    if not user_email or "@" not in user_email:
        return None
    domain = user_email.rsplit("@", 1)[1].strip().lower()
    return labels.get(domain)


def render_context(bundle: ContextBundle, note_max_chars: int) -> str:
    """Serialize notes and contacts for the system instruction."""
    sections: list[str] = []

    notes = bundle.surfaced_notes()
    if notes:
        lines = ["Knowledge notes:"]
        for i, note in enumerate(notes, start=1):
            lines.append(f"[{i}] ({note.topic}) {_truncate(note.content, note_max_chars)}")
        sections.append("\n".join(lines))
    else:
        sections.append("Knowledge notes: none available for this question.")

    contacts_block = format_contacts_block(bundle.company, bundle.contacts)
    if contacts_block:
        sections.append(
            contacts_block
            + "\n(These links are shown to the rep above your answer; you may "
            "suggest which titles to approach first.)"
        )

    return "\n\n".join(sections)


def build_system_instruction(
    bundle: ContextBundle,
    settings: Settings,
    brokerage: str | None = None,
) -> str:
    parts = [PERSONA]
    if brokerage:
        parts.append(f"The rep works at {brokerage}.")

    sources = "\n".join(f"{i}. {src}" for i, src in enumerate(APPROVED_SOURCES, start=1))
    parts.append(f"Approved sources:\n{sources}")
    parts.append(CITATION_RULES)
    parts.append(render_context(bundle, settings.NOTE_MAX_CHARS))
    return "\n\n".join(parts)


def build_prompt(
    bundle: ContextBundle,
    history: Sequence[ConversationTurn],
    user_text: str,
    settings: Settings,
    user_email: str | None = None,
) -> CoachPrompt:
    """
    Assemble the model input for one coaching request.

    Message order: system instruction, the last HISTORY_WINDOW turns (each
    truncated to HISTORY_MAX_CHARS), then the current question.

    Args:
        bundle: Retrieved notes and contacts for this request
        history: Client-supplied prior turns, chronological
        user_text: Current question
        settings: Application settings
        user_email: Optional rep email for tenant labelling

    Returns:
        CoachPrompt with system instruction and messages
    """
    brokerage = tenant_label(user_email, settings.TENANT_LABELS)
    system_instruction = build_system_instruction(bundle, settings, brokerage)

    messages: list[dict[str, str]] = [{"role": "system", "content": system_instruction}]

    window = list(history)[-settings.HISTORY_WINDOW :] if settings.HISTORY_WINDOW > 0 else []
    for turn in window:
        content = _truncate(turn.content, settings.HISTORY_MAX_CHARS)
        if content:
            messages.append({"role": turn.role, "content": content})

    messages.append({"role": "user", "content": user_text.strip()})
    return CoachPrompt(system_instruction=system_instruction, messages=messages)

"""Tests for the coaching prompt builder.

The numbered notes in the system instruction must line up with the order
the notes are surfaced, since the model cites by index.
"""

import pytest

from fr8coach.context.prompt_builder import (
    APPROVED_SOURCES,
    PERSONA,
    build_prompt,
    format_contacts_block,
    tenant_label,
)
from fr8coach.core.schemas_coach import (
    MAX_SURFACED_NOTES,
    ContactRecord,
    ContextBundle,
    ConversationTurn,
    KnowledgeNote,
)
from tests.fakes.fake_settings import make_settings


def _notes(prefix: str, count: int, topic: str = "coaching") -> list[KnowledgeNote]:
    return [KnowledgeNote(topic=topic, content=f"{prefix} {i}") for i in range(1, count + 1)]


@pytest.fixture
def full_bundle():
    return ContextBundle(
        primary_notes=_notes("primary", 2),
        fallback_notes=_notes("fallback", 5),
        industry_notes=_notes("industry", 3, topic="industry"),
    )


class TestContextBundle:
    def test_primary_first_then_fallback_then_industry(self, full_bundle):
        contents = [n.content for n in full_bundle.surfaced_notes()]
        assert contents == [
            "primary 1",
            "primary 2",
            "fallback 1",
            "fallback 2",
            "industry 1",
            "industry 2",
        ]

    def test_fallback_and_secondary_only(self):
        bundle = ContextBundle(
            fallback_notes=_notes("fallback", 9),
            industry_notes=_notes("industry", 9, topic="industry"),
        )
        surfaced = bundle.surfaced_notes()
        assert len(surfaced) == 6
        assert all(not n.content.startswith("primary") for n in surfaced)

    def test_never_more_than_six(self):
        bundle = ContextBundle(
            primary_notes=_notes("primary", 10),
            fallback_notes=_notes("fallback", 10),
            industry_notes=_notes("industry", 10),
        )
        assert len(bundle.surfaced_notes()) == 6

    def test_wide_slot_settings_still_capped_at_six(self):
        bundle = ContextBundle(
            primary_notes=_notes("primary", 10),
            industry_notes=_notes("industry", 10, topic="industry"),
            primary_slots=8,
            industry_slots=4,
        )
        surfaced = bundle.surfaced_notes()
        assert len(surfaced) == MAX_SURFACED_NOTES
        assert [n.content for n in surfaced] == [f"primary {i}" for i in range(1, 7)]

    def test_wide_slot_settings_cap_citations(self):
        bundle = ContextBundle(
            primary_notes=_notes("primary", 10),
            industry_notes=_notes("industry", 10, topic="industry"),
            primary_slots=8,
            industry_slots=4,
        )
        settings = make_settings(PRIMARY_NOTE_SLOTS=8, INDUSTRY_NOTE_SLOTS=4)
        text = build_prompt(bundle, [], "How do I win this lane?", settings).system_instruction
        assert "[6]" in text
        assert "[7]" not in text


class TestSystemInstruction:
    def test_citation_numbers_match_surfaced_order(self, full_bundle):
        prompt = build_prompt(full_bundle, [], "How do I win this lane?", make_settings())
        text = prompt.system_instruction
        for i, note in enumerate(full_bundle.surfaced_notes(), start=1):
            assert f"[{i}] ({note.topic}) {note.content}" in text
        assert "[7]" not in text
        positions = [text.index(f"[{i}]") for i in range(1, 7)]
        assert positions == sorted(positions)

    def test_persona_and_sources_present(self, full_bundle):
        text = build_prompt(full_bundle, [], "q", make_settings()).system_instruction
        assert text.startswith(PERSONA)
        for source in APPROVED_SOURCES:
            assert source in text

    def test_no_notes_is_stated(self):
        text = build_prompt(ContextBundle(), [], "q", make_settings()).system_instruction
        assert "none available" in text

    def test_long_note_truncated(self):
        bundle = ContextBundle(primary_notes=[KnowledgeNote(topic="coaching", content="x" * 50)])
        text = build_prompt(bundle, [], "q", make_settings(NOTE_MAX_CHARS=10)).system_instruction
        assert "x" * 11 not in text

    def test_contacts_block_appended(self):
        bundle = ContextBundle(
            company="Acme Corp",
            contacts=[ContactRecord(title="Jane Doe - Buyer", profile_url="https://linkedin.com/in/jd")],
        )
        text = build_prompt(bundle, [], "q", make_settings()).system_instruction
        assert "Possible contacts at Acme Corp:" in text
        assert "- Jane Doe - Buyer: https://linkedin.com/in/jd" in text

    def test_tenant_label(self):
        settings = make_settings(TENANT_LABELS={"acmelogistics.com": "Acme Logistics"})
        text = build_prompt(
            ContextBundle(), [], "q", settings, user_email="rep@AcmeLogistics.com"
        ).system_instruction
        assert "The rep works at Acme Logistics." in text


class TestMessages:
    def test_order_and_window(self):
        history = [
            ConversationTurn(role="user" if i % 2 == 0 else "assistant", content=f"turn {i}")
            for i in range(12)
        ]
        prompt = build_prompt(ContextBundle(), history, "  current question  ", make_settings())

        assert prompt.messages[0] == {"role": "system", "content": prompt.system_instruction}
        assert [m["content"] for m in prompt.messages[1:-1]] == [f"turn {i}" for i in range(4, 12)]
        assert prompt.messages[-1] == {"role": "user", "content": "current question"}

    def test_history_turns_truncated(self):
        history = [ConversationTurn(role="user", content="y" * 100)]
        prompt = build_prompt(ContextBundle(), history, "q", make_settings(HISTORY_MAX_CHARS=20))
        assert len(prompt.messages[1]["content"]) <= 21

    def test_empty_history_turns_dropped(self):
        history = [ConversationTurn(role="assistant", content="   ")]
        prompt = build_prompt(ContextBundle(), history, "q", make_settings())
        assert len(prompt.messages) == 2


def test_format_contacts_block_empty():
    assert format_contacts_block("Acme", []) == ""


@pytest.mark.parametrize(
    "email, expected",
    [("rep@acme.com", "Acme"), ("rep@other.com", None), (None, None), ("not-an-email", None)],
)
def test_tenant_label_lookup(email, expected):
    assert tenant_label(email, {"acme.com": "Acme"}) == expected

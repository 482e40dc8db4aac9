"""Tests for depth-based injection and author's notes."""

from emotichat.models import ProcessedPromptMessage, PromptInjection, PromptItem
from emotichat.prompt import (
    calculate_insert_position,
    create_injection_message,
    inject_authors_note,
    process_injections,
)


def _msg(role, content, layer=None) -> ProcessedPromptMessage:
    return ProcessedPromptMessage(role=role, content=content, layer=layer)


def _inj(id, depth, order=0, enabled=True, role="system") -> PromptItem:
    return PromptItem(
        id=id, order=order, content=id, role=role, enabled=enabled,
        injection=PromptInjection(enabled=True, depth=depth),
    )


def _sequence(roles: str) -> list[ProcessedPromptMessage]:
    """Build a sequence from a compact role string, e.g. "sua" → system, user, assistant."""
    names = {"s": "system", "u": "user", "a": "assistant"}
    return [_msg(names[r], f"{r}{i}") for i, r in enumerate(roles)]


def _contents(messages) -> list[str]:
    return [m.content for m in messages]


# ── calculate_insert_position ────────────────────────────────


def test_depth_zero_before_last_user_turn():
    assert calculate_insert_position(0, [2, 5, 9], 12) == 9


def test_depth_zero_without_user_turns_appends():
    assert calculate_insert_position(0, [], 4) == 4


def test_depth_counts_back_from_last_user_turn():
    assert calculate_insert_position(1, [2, 5, 9], 12) == 5
    assert calculate_insert_position(2, [2, 5, 9], 12) == 2


def test_depth_beyond_user_turns_goes_to_start():
    assert calculate_insert_position(3, [2, 5, 9], 12) == 0
    assert calculate_insert_position(1, [], 4) == 0


# ── process_injections ───────────────────────────────────────


def test_depth_zero_lands_before_last_user_turn():
    # user turns at positions 2, 5, 9
    base = _sequence("ssuaauaaau")
    result = process_injections(base, [_inj("note", 0)])
    assert result[9].content == "note"
    assert result[10].content == "u9"


def test_depth_zero_without_user_turns_lands_at_end():
    base = _sequence("ssa")
    result = process_injections(base, [_inj("note", 0)])
    assert _contents(result) == ["s0", "s1", "a2", "note"]


def test_depths_zero_and_two_together():
    base = _sequence("suauau")  # user turns at 1, 3, 5
    result = process_injections(base, [_inj("deep", 2), _inj("near", 0)])
    assert _contents(result) == ["s0", "deep", "u1", "a2", "u3", "a4", "near", "u5"]


def test_same_depth_group_sorted_by_order():
    base = _sequence("su")
    result = process_injections(base, [_inj("second", 0, order=5), _inj("first", 0, order=1)])
    assert _contents(result) == ["s0", "first", "second", "u1"]


def test_clamped_depths_deepest_first():
    base = _sequence("su")
    result = process_injections(base, [_inj("d3", 3), _inj("d5", 5)])
    assert _contents(result) == ["d5", "d3", "s0", "u1"]


def test_disabled_injection_items_are_skipped():
    base = _sequence("su")
    result = process_injections(base, [_inj("off", 0, enabled=False)])
    assert _contents(result) == ["s0", "u1"]


def test_injected_messages_have_no_layer_and_keep_role():
    base = [_msg("user", "hi", layer=0)]
    result = process_injections(base, [_inj("note", 0, role="assistant")])
    assert result[0].layer is None
    assert result[0].role == "assistant"
    assert result[1].layer == 0


def test_no_injections_returns_copy():
    base = _sequence("su")
    result = process_injections(base, [])
    assert result == base
    assert result is not base


def test_create_injection_message_defaults():
    msg = create_injection_message("x")
    assert msg.role == "system"
    assert msg.layer is None
    assert msg.adapted_role is None


# ── inject_authors_note ──────────────────────────────────────


def test_authors_note_after_target_user_turn():
    base = _sequence("suauau")
    result = inject_authors_note(base, "AN", depth=1, position="after")
    assert _contents(result) == ["s0", "u1", "a2", "u3", "AN", "a4", "u5"]


def test_authors_note_before_and_clamped():
    base = _sequence("suau")
    result = inject_authors_note(base, "AN", depth=9, position="before")
    assert _contents(result) == ["s0", "AN", "u1", "a2", "u3"]


def test_authors_note_replace():
    base = _sequence("suau")
    result = inject_authors_note(base, "AN", depth=0, position="replace")
    assert _contents(result) == ["s0", "u1", "a2", "AN"]


def test_authors_note_without_user_turns_appends():
    base = _sequence("sa")
    assert _contents(inject_authors_note(base, "AN", depth=3)) == ["s0", "a1", "AN"]

"""Depth-based injection of prompt items into the message sequence.

Depth counts user turns back from the most recent one:
  depth 0: immediately before the latest user turn (end of the prompt if
           there are no user turns)
  depth N: immediately before the user turn N positions before the latest;
           the start of the prompt when there are not that many user turns

User-turn positions are computed once from the incoming sequence. Depths are
processed in ascending order, so each later (deeper) group lands at or before
the earlier ones and never shifts their targets. Groups that both clamp to
index 0 end up deepest-first.
"""

from collections import defaultdict

from emotichat.models import InjectionPosition, ProcessedPromptMessage, PromptItem, PromptRole


def process_injections(
    messages: list[ProcessedPromptMessage],
    injections: list[PromptItem],
) -> list[ProcessedPromptMessage]:
    """Splice injection-enabled items into messages and return a new list."""
    active = [item for item in injections if item.enabled and item.is_injected]
    if not active:
        return list(messages)

    by_depth: dict[int, list[PromptItem]] = defaultdict(list)
    for item in active:
        by_depth[item.injection.depth].append(item)

    user_indices = find_user_indices(messages)
    result = list(messages)
    for depth in sorted(by_depth):
        group = sorted(by_depth[depth], key=lambda item: item.order)
        position = calculate_insert_position(depth, user_indices, len(result))
        result[position:position] = [
            create_injection_message(item.content, item.role) for item in group
        ]
    return result


def find_user_indices(messages: list[ProcessedPromptMessage]) -> list[int]:
    return [i for i, msg in enumerate(messages) if msg.role == "user"]


def calculate_insert_position(depth: int, user_indices: list[int], total: int) -> int:
    """Index to insert a depth's group at, given user-turn positions."""
    if depth == 0:
        return user_indices[-1] if user_indices else total
    target = len(user_indices) - 1 - depth
    if target < 0:
        return 0
    return user_indices[target]


def create_injection_message(content: str, role: PromptRole = "system") -> ProcessedPromptMessage:
    # Injected fragments never carry a layer.
    return ProcessedPromptMessage(role=role, content=content)


def inject_authors_note(
    messages: list[ProcessedPromptMessage],
    note: str,
    depth: int,
    position: InjectionPosition = "after",
) -> list[ProcessedPromptMessage]:
    """Place an already-resolved author's note around a user turn.

    The target is the user turn `depth` positions before the latest one,
    clamped to the first user turn. With no user turns the note is appended.
    """
    note_message = create_injection_message(note, "system")
    user_indices = find_user_indices(messages)
    if not user_indices:
        return [*messages, note_message]

    target = user_indices[max(len(user_indices) - 1 - depth, 0)]
    if position == "replace":
        return [*messages[:target], note_message, *messages[target + 1:]]
    insert_at = target if position == "before" else target + 1
    return [*messages[:insert_at], note_message, *messages[insert_at:]]

"""Gather prompt items from characters, conversations and presets."""

import logging

from emotichat.models import Character, Conversation, PromptItem, PromptPreset

logger = logging.getLogger(__name__)

MAIN_PROMPT_ORDER = 1000
HISTORY_MARKER_ID = "ref-history-marker"


def collect_prompt_items(character: Character, conversation: Conversation) -> list[PromptItem]:
    """Collect every configured item in collection order (not final order).

    Legacy system prompt (order 0), character prompts, conversation prompts,
    then the conversation main prompt (order 1000).
    """
    items: list[PromptItem] = []

    if character.system_prompt:
        items.append(PromptItem(
            id=f"system-{character.id}",
            order=0,
            content=character.system_prompt,
            role="system",
            name="System Prompt",
        ))

    items.extend(character.prompt_config.prompts)
    items.extend(_conversation_items(conversation))
    return items


def collect_prompt_items_with_preset(
    character: Character,
    conversation: Conversation,
    preset: PromptPreset,
    user_profile: Character | None = None,
) -> list[PromptItem]:
    """Collect items laid out by a preset, expanding its reference items.

    Conversation-level items still follow, so per-conversation tweaks
    apply on top of any preset.
    """
    items: list[PromptItem] = []
    for preset_item in sort_prompt_items(preset.prompts):
        if not preset_item.enabled:
            continue
        if preset_item.reference_type:
            expanded = _expand_reference(preset_item, character, user_profile)
            logger.debug(f"Preset reference {preset_item.reference_type} expanded to {len(expanded)} items")
            items.extend(expanded)
        else:
            items.append(preset_item.model_copy())

    items.extend(_conversation_items(conversation))
    return items


def _conversation_items(conversation: Conversation) -> list[PromptItem]:
    config = conversation.prompt_config
    items = list(config.prompts)
    if config.main_prompt:
        items.append(PromptItem(
            id=f"main-{conversation.id}",
            order=MAIN_PROMPT_ORDER,
            content=config.main_prompt,
            role="system",
            name="Main Prompt",
        ))
    return items


def _expand_reference(
    ref: PromptItem,
    character: Character,
    user_profile: Character | None,
) -> list[PromptItem]:
    if ref.reference_type == "character_prompts":
        return _profile_items(ref, character, "ref-char-system")
    if ref.reference_type == "user_prompts":
        if user_profile is None:
            return []
        return _profile_items(ref, user_profile, "ref-user-system")
    if ref.reference_type == "chat_history":
        # Marker only; the builder splices history turns in at this spot.
        return [PromptItem(
            id=HISTORY_MARKER_ID,
            order=ref.order,
            content="",
            role=ref.role,
            name="Chat History",
        )]
    return []


def _profile_items(ref: PromptItem, profile: Character, legacy_prefix: str) -> list[PromptItem]:
    """Configured prompts of a profile, or its legacy system prompt if it has none."""
    prompts = profile.prompt_config.prompts
    if prompts:
        return [
            p.model_copy(update={"order": ref.order, "role": ref.role})
            for p in prompts if p.enabled
        ]
    if profile.system_prompt:
        return [PromptItem(
            id=f"{legacy_prefix}-{profile.id}",
            order=ref.order,
            content=profile.system_prompt,
            role=ref.role,
            name=f"{profile.name} System Prompt",
        )]
    return []


def sort_prompt_items(items: list[PromptItem]) -> list[PromptItem]:
    """Ascending by order; sorted() is stable so ties keep insertion order."""
    return sorted(items, key=lambda item: item.order)


def separate_injection_items(items: list[PromptItem]) -> tuple[list[PromptItem], list[PromptItem]]:
    """Split into (normal, injected) keeping relative order in each."""
    normal: list[PromptItem] = []
    injected: list[PromptItem] = []
    for item in items:
        (injected if item.is_injected else normal).append(item)
    return normal, injected

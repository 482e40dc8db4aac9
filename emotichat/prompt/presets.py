"""Built-in prompt presets. Read-only; storage merges user presets over them."""

from emotichat.models import PromptItem, PromptPreset

DEFAULT_PRESET = PromptPreset(
    id="preset-default",
    name="Default",
    description="Balanced general-purpose setup for most conversations.",
    prompts=[
        PromptItem(
            id="default-system-1",
            order=0,
            content="You are a friendly, helpful companion. Talk with {{user}} naturally and sincerely.",
            role="system",
            name="System Prompt",
        ),
        PromptItem(
            id="default-character",
            order=10,
            role="system",
            name="Character",
            reference_type="character_prompts",
        ),
        PromptItem(
            id="default-history",
            order=100,
            role="system",
            name="Chat History",
            reference_type="chat_history",
        ),
    ],
    is_built_in=True,
)

ROLEPLAY_PRESET = PromptPreset(
    id="preset-roleplay",
    name="Roleplay",
    description="Immersive roleplay: stays in character and keeps replies vivid.",
    prompts=[
        PromptItem(
            id="roleplay-frame",
            order=0,
            content=(
                "This is an ongoing roleplay between {{user}} and {{char}}. "
                "Stay in character as {{char}} at all times."
            ),
            role="system",
            name="Roleplay Frame",
        ),
        PromptItem(
            id="roleplay-character",
            order=10,
            role="system",
            name="Character",
            reference_type="character_prompts",
        ),
        PromptItem(
            id="roleplay-user",
            order=20,
            role="system",
            name="User Persona",
            reference_type="user_prompts",
        ),
        PromptItem(
            id="roleplay-style",
            order=30,
            content=(
                "Write {{char}}'s next reply only. Describe actions in *asterisks* "
                "and never speak for {{user}}."
            ),
            role="system",
            name="Style",
        ),
        PromptItem(
            id="roleplay-history",
            order=100,
            role="system",
            name="Chat History",
            reference_type="chat_history",
        ),
    ],
    authors_note="[Keep the scene moving; {{char}} reacts to what {{user}} just did.]",
    authors_note_depth=3,
    authors_note_position="after",
    is_built_in=True,
)

BUILT_IN_PRESETS: list[PromptPreset] = [DEFAULT_PRESET, ROLEPLAY_PRESET]


def get_built_in_preset(preset_id: str) -> PromptPreset | None:
    for preset in BUILT_IN_PRESETS:
        if preset.id == preset_id:
            return preset
    return None


def built_in_preset_ids() -> list[str]:
    return [preset.id for preset in BUILT_IN_PRESETS]

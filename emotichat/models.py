"""Core domain models.

All prompt pipeline stages operate on these types. Storage keeps plain dicts
on disk; pydantic validates them at every boundary into the pipeline.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

PromptRole = Literal["system", "user", "assistant"]
InjectionPosition = Literal["before", "after", "replace"]
ReferenceType = Literal["character_prompts", "user_prompts", "chat_history"]
LengthExceededStrategy = Literal["warn", "truncate", "error"]


class PromptInjection(BaseModel):
    """Places a prompt item relative to a user turn instead of its sort order."""

    enabled: bool = False
    depth: int = Field(default=0, ge=0)  # 0 = just before the latest user turn
    position: InjectionPosition = "before"


class PromptItem(BaseModel):
    """A configured prompt fragment."""

    id: str
    order: float = 0
    content: str = ""
    enabled: bool = True
    role: PromptRole = "system"
    name: str | None = None
    description: str | None = None
    injection: PromptInjection | None = None
    reference_type: ReferenceType | None = None  # preset items only

    @property
    def is_injected(self) -> bool:
        return self.injection is not None and self.injection.enabled


class ProcessedPromptMessage(BaseModel):
    """One message of the assembled prompt."""

    role: PromptRole
    content: str
    layer: int | None = None  # history index; never set on fragments
    adapted_role: str | None = None  # set by the role adapter only


class ChatMessage(BaseModel):
    """A turn of conversation history."""

    role: PromptRole
    content: str
    id: str | None = None
    ts: str | None = None


class CharacterPromptConfig(BaseModel):
    opening_message: str = ""
    prompts: list[PromptItem] = Field(default_factory=list)


class ConversationPromptConfig(BaseModel):
    main_prompt: str | None = None
    prompts: list[PromptItem] = Field(default_factory=list)
    variables: dict[str, str] = Field(default_factory=dict)  # setvar/getvar store


class Character(BaseModel):
    """A companion character (or a user profile, which shares the shape)."""

    id: str
    name: str
    description: str = ""
    system_prompt: str = ""  # legacy single-field prompt
    prompt_config: CharacterPromptConfig = Field(default_factory=CharacterPromptConfig)


class Conversation(BaseModel):
    id: str
    character_id: str = ""
    title: str = ""
    prompt_config: ConversationPromptConfig = Field(default_factory=ConversationPromptConfig)


class PromptPreset(BaseModel):
    """A reusable prompt layout; reference items pull in character/user prompts."""

    id: str
    name: str
    description: str = ""
    prompts: list[PromptItem] = Field(default_factory=list)
    authors_note: str | None = None
    authors_note_depth: int = Field(default=3, ge=0)
    authors_note_position: InjectionPosition = "after"
    is_built_in: bool = False


class PostProcessConfig(BaseModel):
    """Toggles for the final clean-up pass. Unset fields keep these defaults."""

    enable_deduplication: bool = True
    enable_empty_filter: bool = True
    enable_merging: bool = False
    enable_formatting: bool = True
    enable_length_check: bool = True
    max_message_length: int = Field(default=32000, ge=0)  # 0 = unlimited
    max_total_tokens: int = Field(default=0, ge=0)  # 0 = unlimited
    length_exceeded_strategy: LengthExceededStrategy = "warn"


class BuildContext(BaseModel):
    """Everything the resolvers can substitute for one build call."""

    character_id: str
    character_name: str
    conversation_id: str
    user_name: str = "User"
    message_history: list[ChatMessage] = Field(default_factory=list)
    last_user_message: str | None = None
    system_variables: dict[str, str] = Field(default_factory=dict)
    temporary_variables: dict[str, str] = Field(default_factory=dict)


class BuildPromptOptions(BaseModel):
    skip_post_process: bool = False
    post_process_config: PostProcessConfig | None = None
    user_name: str | None = None
    extra_variables: dict[str, str] = Field(default_factory=dict)
    active_user_profile: Character | None = None


class BuildPromptResult(BaseModel):
    messages: list[ProcessedPromptMessage]
    updated_variables: dict[str, str] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)

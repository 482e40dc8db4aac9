"""Pydantic request/response models for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field

from emotichat.models import (
    CharacterPromptConfig,
    PostProcessConfig,
    ProcessedPromptMessage,
    PromptItem,
    PromptRole,
    InjectionPosition,
)


class CreateCharacter(BaseModel):
    name: str
    description: str = ""
    system_prompt: str = ""
    prompt_config: CharacterPromptConfig = Field(default_factory=CharacterPromptConfig)


class UpdateCharacter(BaseModel):
    name: str | None = None
    description: str | None = None
    system_prompt: str | None = None
    prompt_config: CharacterPromptConfig | None = None


class CreateConversation(BaseModel):
    character_id: str
    title: str = ""


class UpdateConversationPromptConfig(BaseModel):
    main_prompt: str | None = None
    prompts: list[PromptItem] | None = None
    variables: dict[str, str] | None = None


class UpdateConversation(BaseModel):
    title: str | None = None
    prompt_config: UpdateConversationPromptConfig | None = None


class NewMessage(BaseModel):
    role: PromptRole
    content: str


class SavePreset(BaseModel):
    name: str
    description: str = ""
    prompts: list[PromptItem] = Field(default_factory=list)
    authors_note: str | None = None
    authors_note_depth: int = Field(default=3, ge=0)
    authors_note_position: InjectionPosition = "after"


class BuildPromptBody(BaseModel):
    provider: str | None = None
    user_name: str | None = None
    extra_variables: dict[str, str] = Field(default_factory=dict)
    skip_post_process: bool = False
    post_process_config: PostProcessConfig | None = None
    preset_id: str | None = None
    user_profile_id: str | None = None
    persist_variables: bool = True


class BuildPromptResponse(BaseModel):
    messages: list[ProcessedPromptMessage]
    updated_variables: dict[str, str]
    warnings: list[str]
    system_instruction: str | None = None
    provider: str


class SettingsPatch(BaseModel):
    default_provider: str | None = None
    user_name: str | None = None
    location: str | None = None
    active_preset: str | None = None
    post_process: dict[str, Any] | None = None

"""Prompt build endpoint: assembles the message list for a conversation."""

import logging

from fastapi import APIRouter, HTTPException

from emotichat import storage
from emotichat.models import (
    BuildPromptOptions,
    Character,
    ChatMessage,
    Conversation,
    PostProcessConfig,
    PromptPreset,
)
from emotichat.prompt import (
    PromptLengthError,
    Provider,
    build_prompt_with_context,
    extract_system_instruction,
    filter_out_system_instruction,
    normalize_provider,
)

from .models import BuildPromptBody, BuildPromptResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/conversations/{conversation_id}/prompt", response_model=BuildPromptResponse,
             response_model_exclude_none=True)
async def build_conversation_prompt(conversation_id: str, body: BuildPromptBody):
    """Build the prompt for a conversation's stored history.

    Settings supply defaults for provider, user name, location, preset and
    post-processing. For Gemini the merged system instruction is returned
    separately and removed from the message list.
    """
    conv = storage.get_conversation(conversation_id)
    if not conv:
        raise HTTPException(404, "Conversation not found")
    char = storage.get_character(conv["character_id"])
    if not char:
        raise HTTPException(404, "Character not found")
    config = storage.get_config()

    user_profile = None
    if body.user_profile_id:
        profile = storage.get_character(body.user_profile_id)
        if not profile:
            raise HTTPException(404, "User profile not found")
        user_profile = Character.model_validate(profile)

    preset = None
    preset_id = body.preset_id if body.preset_id is not None else config["active_preset"]
    if preset_id:
        record = storage.get_preset(preset_id)
        if not record:
            raise HTTPException(404, "Preset not found")
        preset = PromptPreset.model_validate(record)

    extra_variables = dict(body.extra_variables)
    if config["location"]:
        extra_variables.setdefault("location", config["location"])

    options = BuildPromptOptions(
        skip_post_process=body.skip_post_process,
        post_process_config=body.post_process_config
        or PostProcessConfig.model_validate(config["post_process"]),
        user_name=body.user_name or config["user_name"] or None,
        extra_variables=extra_variables,
        active_user_profile=user_profile,
    )
    provider = body.provider or config["default_provider"]
    history = [ChatMessage.model_validate(m) for m in storage.get_messages(conversation_id)]

    try:
        result = build_prompt_with_context(
            Character.model_validate(char),
            Conversation.model_validate(conv),
            history,
            provider,
            options,
            preset,
        )
    except PromptLengthError as e:
        raise HTTPException(422, str(e))

    if body.persist_variables and result.updated_variables != conv["prompt_config"].get("variables", {}):
        storage.save_variables(conversation_id, result.updated_variables)

    provider_type = normalize_provider(provider)
    messages = result.messages
    system_instruction = None
    if provider_type is Provider.GEMINI:
        system_instruction = extract_system_instruction(messages)
        messages = filter_out_system_instruction(messages)

    for warning in result.warnings:
        logger.info(f"Prompt warning for conversation {conversation_id}: {warning}")

    return BuildPromptResponse(
        messages=messages,
        updated_variables=result.updated_variables,
        warnings=result.warnings,
        system_instruction=system_instruction,
        provider=provider_type.value,
    )

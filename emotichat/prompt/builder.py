"""Prompt builder: runs every pipeline stage in a fixed order.

  1. build the resolution context
  2. collect prompt items (character, conversation, or preset layout)
  3. seed a macro store from the conversation's variables
  4. resolve each item: variables → placeholders → macros
  5. sort items by order
  6. split normal items from injected ones
  7. assemble normal items plus resolved history turns
  8. inject depth-positioned items (then the preset's author's note)
  9. adapt roles for the target provider
 10. post-process (unless skipped)

Macros run last in step 4 so their arguments can embed already-substituted
values. Moving any step changes the output for every conversation.
"""

import logging

from emotichat.models import (
    BuildContext,
    BuildPromptOptions,
    BuildPromptResult,
    Character,
    ChatMessage,
    Conversation,
    ProcessedPromptMessage,
    PromptItem,
    PromptPreset,
    PromptRole,
)

from .collector import (
    HISTORY_MARKER_ID,
    collect_prompt_items,
    collect_prompt_items_with_preset,
    separate_injection_items,
    sort_prompt_items,
)
from .injection import inject_authors_note, process_injections
from .macros import MacroStore, create_macro_store, expand_macros, macro_store_to_dict
from .placeholders import DEFAULT_USER_NAME, replace_placeholders
from .post_processor import DEFAULT_POST_PROCESS_CONFIG, advanced_post_process, format_content
from .role_adapter import Provider, adapt_role_for_provider, normalize_provider
from .variables import current_system_variables, replace_variables

logger = logging.getLogger(__name__)


def build_prompt(
    character: Character,
    conversation: Conversation,
    history: list[ChatMessage],
    provider: str,
    options: BuildPromptOptions | None = None,
    preset: PromptPreset | None = None,
) -> list[ProcessedPromptMessage]:
    """Build the final message list for a provider."""
    return build_prompt_with_context(character, conversation, history, provider, options, preset).messages


def build_prompt_with_context(
    character: Character,
    conversation: Conversation,
    history: list[ChatMessage],
    provider: str,
    options: BuildPromptOptions | None = None,
    preset: PromptPreset | None = None,
) -> BuildPromptResult:
    """Build the final message list plus updated macro variables and warnings.

    Raises PromptLengthError when a message is too long and the post-process
    strategy is "error".
    """
    options = options or BuildPromptOptions()

    context = create_build_context(character, conversation, history, options)

    if preset is not None:
        logger.debug(f"Building with preset {preset.name} ({preset.id})")
        items = collect_prompt_items_with_preset(
            character, conversation, preset, options.active_user_profile,
        )
    else:
        items = collect_prompt_items(character, conversation)
    items = [item for item in items if item.enabled]
    logger.debug(f"Collected {len(items)} enabled prompt items")

    store = create_macro_store(conversation.prompt_config.variables)

    items = [
        item.model_copy(update={"content": resolve_text(item.content, context, store)})
        for item in items
    ]
    items = sort_prompt_items(items)
    normal_items, injected_items = separate_injection_items(items)

    messages = build_base_messages(normal_items, history, context, store)
    messages = process_injections(messages, injected_items)

    if preset is not None and preset.authors_note:
        note = resolve_text(preset.authors_note, context, store)
        messages = inject_authors_note(
            messages, note, preset.authors_note_depth, preset.authors_note_position,
        )

    provider_type = normalize_provider(provider)
    messages = adapt_role_for_provider(messages, provider_type)

    warnings: list[str] = []
    if not options.skip_post_process:
        processed = advanced_post_process(
            messages, options.post_process_config or DEFAULT_POST_PROCESS_CONFIG,
        )
        messages = processed.messages
        warnings = processed.warnings

    return BuildPromptResult(
        messages=messages,
        updated_variables=macro_store_to_dict(store),
        warnings=warnings,
    )


def create_build_context(
    character: Character,
    conversation: Conversation,
    history: list[ChatMessage],
    options: BuildPromptOptions,
) -> BuildContext:
    last_user_message = None
    for msg in reversed(history):
        if msg.role == "user":
            last_user_message = msg.content
            break

    user_name = options.user_name
    if not user_name and options.active_user_profile is not None:
        user_name = options.active_user_profile.name

    return BuildContext(
        character_id=character.id,
        character_name=character.name,
        conversation_id=conversation.id,
        user_name=user_name or DEFAULT_USER_NAME,
        message_history=list(history),
        last_user_message=last_user_message,
        system_variables={**current_system_variables(), **options.extra_variables},
        temporary_variables=dict(conversation.prompt_config.variables),
    )


def resolve_text(text: str, context: BuildContext, store: MacroStore) -> str:
    """Variables, then placeholders, then macros."""
    result = replace_variables(text, context)
    result = replace_placeholders(result, context)
    return expand_macros(result, store)


def build_base_messages(
    items: list[PromptItem],
    history: list[ChatMessage],
    context: BuildContext,
    store: MacroStore,
) -> list[ProcessedPromptMessage]:
    """Normal items in order, with history at the marker or at the end."""
    history_messages = [
        ProcessedPromptMessage(
            role=msg.role,
            content=resolve_text(msg.content, context, store),
            layer=index,
        )
        for index, msg in enumerate(history)
    ]

    result: list[ProcessedPromptMessage] = []
    placed_history = False
    for item in items:
        if item.id == HISTORY_MARKER_ID:
            if not placed_history:
                result.extend(history_messages)
                placed_history = True
            continue
        if item.id.startswith("ref-") and not item.content.strip():
            continue
        result.append(ProcessedPromptMessage(role=item.role, content=item.content))

    if not placed_history:
        result.extend(history_messages)
    where = "marker" if placed_history else "end"
    logger.debug(f"Base sequence: {len(result)} messages ({len(history_messages)} history, at {where})")
    return result


def build_simple_prompt(
    system_prompt: str,
    turns: list[tuple[PromptRole, str]] | list[ChatMessage],
    provider: str = Provider.OPENAI.value,
) -> list[ProcessedPromptMessage]:
    """System prompt plus turns, formatted and role-adapted; nothing else."""
    messages = [ProcessedPromptMessage(role="system", content=format_content(system_prompt))]
    for turn in turns:
        role, content = (turn.role, turn.content) if isinstance(turn, ChatMessage) else turn
        messages.append(ProcessedPromptMessage(role=role, content=format_content(content)))
    return adapt_role_for_provider(messages, normalize_provider(provider))

"""Prompt assembly pipeline.

Turns a character, a conversation and its history into the ordered,
role-tagged message list sent to a model backend:

  items → variables → placeholders → macros → sort → split(normal, injected)
        → base sequence (items + history) → injections → role adaptation
        → post-processing

Template syntax (unresolved tokens are left verbatim):
  {{time}} {{location}} {{device_info}}                 system variables
  {{user}} {{char}} {{character}}                        participant names
  {{last_user_message}} {{chat_history}}                 history placeholders
  {{setvar::name::value}} {{getvar::name}}               macro store
  {{random::a::b::...}}                                  random choice

Nothing here calls a backend or touches storage; the caller persists
updated_variables and sends the messages onward.
"""

from .builder import (  # noqa: F401
    build_prompt,
    build_prompt_with_context,
    build_simple_prompt,
    create_build_context,
)
from .collector import (  # noqa: F401
    collect_prompt_items,
    collect_prompt_items_with_preset,
    separate_injection_items,
    sort_prompt_items,
)
from .injection import (  # noqa: F401
    calculate_insert_position,
    create_injection_message,
    inject_authors_note,
    process_injections,
)
from .macros import (  # noqa: F401
    create_macro_store,
    expand_macros,
    macro_store_to_dict,
)
from .placeholders import (  # noqa: F401
    format_chat_history,
    replace_placeholders,
)
from .post_processor import (  # noqa: F401
    DEFAULT_POST_PROCESS_CONFIG,
    PromptLengthError,
    advanced_post_process,
    check_message_length,
    count_tokens_estimate,
    deduplicate_messages,
    filter_empty_messages,
    format_content,
    merge_consecutive_messages,
    truncate_message,
)
from .presets import (  # noqa: F401
    BUILT_IN_PRESETS,
    built_in_preset_ids,
    get_built_in_preset,
)
from .role_adapter import (  # noqa: F401
    Provider,
    adapt_role_for_provider,
    extract_system_instruction,
    filter_out_system_instruction,
    normalize_provider,
)
from .variables import (  # noqa: F401
    current_system_variables,
    replace_variables,
)

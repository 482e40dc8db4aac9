"""File-based JSON storage.

Data layout:
  data/
    config.json                      App settings (default provider, user name,
                                     location, active preset, post-processing)
    presets.json                     User prompt presets (built-ins merged at read time)
    characters/<id>.json             Character records (name, prompt_config, legacy
                                     system_prompt)
    conversations/<id>.json          Conversation records (character_id, prompt_config
                                     with main_prompt, prompts and macro variables)
    conversations/<id>/messages.json Message history (role, content, id, ts)

Read-modify-write sequences hold a per-file lock. Legacy character records are
upgraded on first read (see migrations.py); the prompt pipeline never sees the
old shape unless handed a record directly.
"""

# Re-export all public symbols so `from emotichat import storage` keeps working.

from .core import (  # noqa: F401
    characters_dir,
    conversations_dir,
    data_dir,
    file_lock,
    init_storage,
    new_id,
    now_iso,
)

from .characters import (  # noqa: F401
    create_character,
    delete_character,
    get_character,
    list_characters,
    update_character,
)

from .conversations import (  # noqa: F401
    append_messages,
    create_conversation,
    delete_conversation,
    delete_message,
    get_conversation,
    get_messages,
    list_conversations,
    save_variables,
    update_conversation,
)

from .presets import (  # noqa: F401
    delete_preset,
    get_preset,
    list_presets,
    save_preset,
)

from .migrations import migrate_character  # noqa: F401

from .config import (  # noqa: F401
    get_config,
    update_config,
)

"""Create demo characters and conversations for development/testing."""

import shutil

from emotichat import storage

DEMO_CHARACTERS = [
    {
        "name": "Aria",
        "description": "A warm, curious companion who loves stargazing.",
        "prompt_config": {
            "opening_message": "Oh, hi {{user}}! The sky is so clear tonight. Want to look for constellations?",
            "prompts": [
                {
                    "id": "aria-persona",
                    "order": 0,
                    "content": "You are {{char}}, a gentle companion who talks about the night sky with {{user}}.",
                    "role": "system",
                    "name": "Persona",
                },
                {
                    "id": "aria-mood",
                    "order": 10,
                    "content": "{{char}}'s mood right now: {{random::cheerful::dreamy::playful}}.",
                    "role": "system",
                    "name": "Mood",
                },
                {
                    "id": "aria-reminder",
                    "order": 20,
                    "content": "Keep replies short and never break character.",
                    "role": "system",
                    "name": "Reminder",
                    "injection": {"enabled": True, "depth": 0, "position": "before"},
                },
            ],
        },
    },
    {
        # Old-style record: single camelCase system prompt, upgraded when saved.
        "name": "Professor Quill",
        "description": "A retired librarian with a story for every occasion.",
        "systemPrompt": "You are {{char}}, a kindly retired librarian. It is {{time}}.",
    },
]


def create_demo_data() -> None:
    """Wipe existing characters/conversations and create fresh demo data."""
    for directory in (storage.characters_dir(), storage.conversations_dir()):
        if directory.exists():
            shutil.rmtree(directory)
        directory.mkdir(parents=True, exist_ok=True)

    for fields in DEMO_CHARACTERS:
        char = storage.create_character(fields)
        conv = storage.create_conversation(char["id"], f"Chat with {char['name']}")
        opening = char["prompt_config"].get("opening_message", "")
        if opening:
            storage.append_messages(conv["id"], [{"role": "assistant", "content": opening}])

    print(f"Created {len(DEMO_CHARACTERS)} demo characters")

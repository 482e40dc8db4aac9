"""Participant placeholders: {{user}}, {{char}}, {{last_user_message}}, {{chat_history}}."""

import re
from collections.abc import Sequence

from emotichat.models import BuildContext, ChatMessage

DEFAULT_USER_NAME = "User"
DEFAULT_CHARACTER_NAME = "Assistant"

_ROLE_LABELS = {
    "user": "User",
    "assistant": "Assistant",
    "system": "System",
}

_USER_RE = re.compile(r"\{\{user\}\}", re.IGNORECASE)
_CHAR_RE = re.compile(r"\{\{(?:char|character)\}\}", re.IGNORECASE)
_LAST_USER_RE = re.compile(r"\{\{last_user_message\}\}", re.IGNORECASE)
_HISTORY_RE = re.compile(r"\{\{chat_history\}\}", re.IGNORECASE)


def replace_placeholders(text: str, context: BuildContext) -> str:
    # Replacements go through lambdas so backslashes in names and messages
    # are not read as group references.
    user_name = context.user_name or DEFAULT_USER_NAME
    char_name = context.character_name or DEFAULT_CHARACTER_NAME

    result = _USER_RE.sub(lambda _: user_name, text)
    result = _CHAR_RE.sub(lambda _: char_name, result)
    if context.last_user_message:
        last = context.last_user_message
        result = _LAST_USER_RE.sub(lambda _: last, result)
    if _HISTORY_RE.search(result):
        history = format_chat_history(context.message_history)
        result = _HISTORY_RE.sub(lambda _: history, result)
    return result


def format_chat_history(history: Sequence[ChatMessage]) -> str:
    """Render history as "Label: content" blocks separated by a blank line."""
    if not history:
        return ""
    return "\n\n".join(
        f"{_ROLE_LABELS.get(msg.role, msg.role)}: {msg.content}" for msg in history
    )

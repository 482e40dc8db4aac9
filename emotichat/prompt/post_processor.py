"""Final clean-up of the assembled prompt.

Steps, each toggled by PostProcessConfig and run in this order:
  1. formatting: line endings, trailing whitespace, blank-line runs, trim
  2. empty filter: drop messages with blank content
  3. deduplication: drop a message identical to the one right before it
  4. merging: join consecutive same-role messages (off by default)
  5. length check: per message, against max_message_length
  6. token budget: whole prompt estimate against max_total_tokens

Every step that changes or flags something adds a warning. Only the "error"
length strategy aborts, by raising PromptLengthError.
"""

import logging
import math
import re
from typing import NamedTuple

from emotichat.models import PostProcessConfig, ProcessedPromptMessage

logger = logging.getLogger(__name__)

DEFAULT_POST_PROCESS_CONFIG = PostProcessConfig()
TRUNCATION_SUFFIX = "...[truncated]"

_BLANK_RUN_RE = re.compile(r"\n{3,}")
_CJK_RE = re.compile(r"[一-龥]")


class PromptLengthError(ValueError):
    """Raised when a message is too long and the strategy is "error"."""


class LengthCheck(NamedTuple):
    exceeded: bool
    length: int


class PostProcessResult(NamedTuple):
    messages: list[ProcessedPromptMessage]
    warnings: list[str]


# ── Text formatting ───────────────────────────────────────


def format_content(content: str) -> str:
    """Normalize one message's text.

    "\\r\\n" and "\\r" become "\\n", trailing whitespace is stripped from every
    line, runs of three or more newlines collapse to two, and the whole text
    is trimmed.
    """
    result = content.replace("\r\n", "\n").replace("\r", "\n")
    result = "\n".join(line.rstrip() for line in result.split("\n"))
    result = _BLANK_RUN_RE.sub("\n\n", result)
    return result.strip()


def is_empty_content(content: str) -> bool:
    return not content.strip()


# ── Message-list steps ────────────────────────────────────


def format_messages(messages: list[ProcessedPromptMessage]) -> list[ProcessedPromptMessage]:
    return [msg.model_copy(update={"content": format_content(msg.content)}) for msg in messages]


def filter_empty_messages(messages: list[ProcessedPromptMessage]) -> list[ProcessedPromptMessage]:
    return [msg for msg in messages if not is_empty_content(msg.content)]


def deduplicate_messages(messages: list[ProcessedPromptMessage]) -> list[ProcessedPromptMessage]:
    """Drop messages repeating the previous kept one. Non-adjacent repeats stay."""
    result: list[ProcessedPromptMessage] = []
    for msg in messages:
        if result and _same_role(result[-1], msg) and result[-1].content.strip() == msg.content.strip():
            continue
        result.append(msg)
    return result


def merge_consecutive_messages(
    messages: list[ProcessedPromptMessage],
    separator: str = "\n\n",
) -> list[ProcessedPromptMessage]:
    """Join runs of same-role messages; the first message's layer is kept."""
    result: list[ProcessedPromptMessage] = []
    for msg in messages:
        if result and _same_role(result[-1], msg):
            prev = result[-1]
            result[-1] = prev.model_copy(update={"content": f"{prev.content}{separator}{msg.content}"})
        else:
            result.append(msg)
    return result


def _same_role(a: ProcessedPromptMessage, b: ProcessedPromptMessage) -> bool:
    return a.role == b.role and a.adapted_role == b.adapted_role


def check_message_length(message: ProcessedPromptMessage, max_length: int) -> LengthCheck:
    length = len(message.content)
    return LengthCheck(exceeded=max_length > 0 and length > max_length, length=length)


def truncate_message(
    message: ProcessedPromptMessage,
    max_length: int,
    suffix: str = TRUNCATION_SUFFIX,
) -> ProcessedPromptMessage:
    """Clip content to exactly max_length characters, ending with suffix."""
    if len(message.content) <= max_length:
        return message
    if len(suffix) >= max_length:
        return message.model_copy(update={"content": suffix[:max_length]})
    keep = max_length - len(suffix)
    return message.model_copy(update={"content": message.content[:keep] + suffix})


def count_tokens_estimate(text: str) -> int:
    """Rough token count: 1.5 CJK characters or 4 other characters per token."""
    if not text:
        return 0
    cjk = len(_CJK_RE.findall(text))
    other = len(text) - cjk
    return math.ceil(cjk / 1.5) + math.ceil(other / 4)


def count_messages_tokens(messages: list[ProcessedPromptMessage]) -> int:
    return sum(count_tokens_estimate(msg.content) for msg in messages)


# ── Pipeline ──────────────────────────────────────────────


def advanced_post_process(
    messages: list[ProcessedPromptMessage],
    config: PostProcessConfig | None = None,
) -> PostProcessResult:
    """Run the configured clean-up steps and collect warnings."""
    config = config or DEFAULT_POST_PROCESS_CONFIG
    warnings: list[str] = []
    result = list(messages)

    if config.enable_formatting:
        formatted = format_messages(result)
        changed = sum(1 for before, after in zip(result, formatted) if before.content != after.content)
        if changed:
            warnings.append(f"Formatted {changed} message(s)")
        result = formatted

    if config.enable_empty_filter:
        before = len(result)
        result = filter_empty_messages(result)
        if len(result) < before:
            warnings.append(f"Removed {before - len(result)} empty message(s)")

    if config.enable_deduplication:
        before = len(result)
        result = deduplicate_messages(result)
        if len(result) < before:
            warnings.append(f"Removed {before - len(result)} duplicate message(s)")

    if config.enable_merging:
        before = len(result)
        result = merge_consecutive_messages(result)
        if len(result) < before:
            warnings.append(f"Merged {before - len(result)} consecutive message(s) with the same role")

    if config.enable_length_check and config.max_message_length > 0:
        result = _apply_length_check(result, config, warnings)

    if config.max_total_tokens > 0:
        total = count_messages_tokens(result)
        if total > config.max_total_tokens:
            warnings.append(
                f"Estimated total tokens {total} exceeds limit {config.max_total_tokens}"
            )

    for warning in warnings:
        logger.warning(f"Post-process: {warning}")
    return PostProcessResult(result, warnings)


def _apply_length_check(
    messages: list[ProcessedPromptMessage],
    config: PostProcessConfig,
    warnings: list[str],
) -> list[ProcessedPromptMessage]:
    max_length = config.max_message_length
    result: list[ProcessedPromptMessage] = []
    for index, msg in enumerate(messages):
        check = check_message_length(msg, max_length)
        if not check.exceeded:
            result.append(msg)
            continue

        strategy = config.length_exceeded_strategy
        if strategy == "error":
            raise PromptLengthError(
                f"Message {index} ({msg.role}) is {check.length} characters, "
                f"limit is {max_length}"
            )
        if strategy == "truncate":
            result.append(truncate_message(msg, max_length))
            warnings.append(
                f"Message {index} ({msg.role}) truncated from {check.length} to {max_length} characters"
            )
        else:
            result.append(msg)
            warnings.append(
                f"Message {index} ({msg.role}) exceeds max length: {check.length} > {max_length}"
            )
    return result

"""Map the internal system/user/assistant roles onto each backend's format.

Most backends take the three roles as they are. Gemini has no system role:
every system message is folded into one system instruction placed first,
which callers send as a separate request parameter.
"""

from enum import Enum

from emotichat.models import ProcessedPromptMessage

SYSTEM_INSTRUCTION = "system_instruction"


class Provider(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


def normalize_provider(name: str) -> Provider:
    """Pick the adapter variant from a free-form provider or model name."""
    normalized = (name or "").lower()
    if "gemini" in normalized or "google" in normalized:
        return Provider.GEMINI
    if "claude" in normalized or "anthropic" in normalized:
        return Provider.ANTHROPIC
    # "openai"/"gpt" and anything unrecognised use the OpenAI layout
    return Provider.OPENAI


class PassThroughAdapter:
    """Backends with a native system role."""

    def adapt(self, messages: list[ProcessedPromptMessage]) -> list[ProcessedPromptMessage]:
        return [msg.model_copy(update={"adapted_role": msg.role}) for msg in messages]


class SystemInstructionAdapter:
    """Backends without a system role: merge system content into one instruction."""

    def __init__(self, model_role: str = "model", separator: str = "\n\n") -> None:
        self.model_role = model_role
        self.separator = separator

    def adapt(self, messages: list[ProcessedPromptMessage]) -> list[ProcessedPromptMessage]:
        system_parts = [msg.content for msg in messages if msg.role == "system"]

        result: list[ProcessedPromptMessage] = []
        if system_parts:
            result.append(ProcessedPromptMessage(
                role="system",
                content=self.separator.join(system_parts),
                adapted_role=SYSTEM_INSTRUCTION,
            ))
        for msg in messages:
            if msg.role == "system":
                continue
            adapted = self.model_role if msg.role == "assistant" else msg.role
            result.append(msg.model_copy(update={"adapted_role": adapted}))
        return result


_ADAPTERS: dict[Provider, PassThroughAdapter | SystemInstructionAdapter] = {
    Provider.OPENAI: PassThroughAdapter(),
    Provider.ANTHROPIC: PassThroughAdapter(),
    Provider.GEMINI: SystemInstructionAdapter(model_role="model"),
}


def adapt_role_for_provider(
    messages: list[ProcessedPromptMessage],
    provider: Provider | str,
) -> list[ProcessedPromptMessage]:
    if not isinstance(provider, Provider):
        provider = normalize_provider(provider)
    return _ADAPTERS[provider].adapt(messages)


def extract_system_instruction(messages: list[ProcessedPromptMessage]) -> str | None:
    """Content of the merged system instruction, if the sequence has one."""
    for msg in messages:
        if msg.adapted_role == SYSTEM_INSTRUCTION:
            return msg.content
    return None


def filter_out_system_instruction(messages: list[ProcessedPromptMessage]) -> list[ProcessedPromptMessage]:
    return [msg for msg in messages if msg.adapted_role != SYSTEM_INSTRUCTION]

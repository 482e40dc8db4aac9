"""Macro expansion: {{setvar::name::value}}, {{getvar::name}}, {{random::a::b::...}}.

setvar and getvar share one left-to-right pass, so a read only sees writes
that appear before it in the text. random runs as a second pass, so its options
may come from getvar. Neither pass re-scans its own output.
"""

import random
import re

MacroStore = dict[str, str]

_STORE_MACRO_RE = re.compile(
    r"\{\{setvar::(?P<set_name>[^:}]+)::(?P<set_value>[^}]+)\}\}"
    r"|\{\{getvar::(?P<get_name>[^}]+)\}\}"
)
_RANDOM_RE = re.compile(r"\{\{random::([^}]+)\}\}")


def expand_macros(text: str, store: MacroStore | None = None) -> str:
    """Expand all macros in text, reading and writing store in place."""
    if store is None:
        store = {}
    result = _process_store_macros(text, store)
    return _process_random_macros(result)


def _process_store_macros(text: str, store: MacroStore) -> str:
    def _replace(match: re.Match) -> str:
        if match.group("set_name") is not None:
            store[match.group("set_name").strip()] = match.group("set_value").strip()
            return ""
        return store.get(match.group("get_name").strip(), "")

    return _STORE_MACRO_RE.sub(_replace, text)


def _process_random_macros(text: str) -> str:
    def _replace(match: re.Match) -> str:
        options = [opt.strip() for opt in match.group(1).split("::")]
        options = [opt for opt in options if opt]
        if not options:
            return ""
        return random.choice(options)

    return _RANDOM_RE.sub(_replace, text)


def create_macro_store(variables: dict[str, str] | None = None) -> MacroStore:
    """Fresh store for one build call, seeded from persisted variables."""
    return dict(variables or {})


def macro_store_to_dict(store: MacroStore) -> dict[str, str]:
    return dict(store)

"""System variable substitution: {{time}}, {{location}}, {{device_info}}."""

import platform
from datetime import datetime

from emotichat.models import BuildContext

SYSTEM_VARIABLES = ("time", "location", "device_info")


def replace_variables(text: str, context: BuildContext) -> str:
    """Substitute system variables that have a value in the context.

    Tokens without a value are left in the text untouched.
    """
    result = text
    for name in SYSTEM_VARIABLES:
        value = context.system_variables.get(name)
        if value:
            result = result.replace(f"{{{{{name}}}}}", value)
    return result


def current_system_variables() -> dict[str, str]:
    """Compute the ambient values for this process.

    Location cannot be detected server-side; it comes from settings or
    caller-supplied extra variables.
    """
    now = datetime.now()
    return {
        "time": now.strftime("%Y-%m-%d %H:%M"),
        "device_info": f"{platform.system() or 'Unknown'} - {platform.platform()}",
    }

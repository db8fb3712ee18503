"""Variable substitution for scenario text.

Scenario labels and descriptions may reference variables as ``${name}``.
Names match case-insensitively. A placeholder whose value itself contains
placeholders is expanded on the next pass, up to ``MAX_PASSES``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from arkham.scenario.models import Variable, VariableValue

MAX_PASSES = 10
MAX_LENGTH = 100_000
# Integral floats from here on print in exponent form (1e+21)
EXPONENT_THRESHOLD = 1e21
TOO_LONG_MARKER = "#ERROR: Text too long#"

# Innermost placeholder: no braces inside the name
_PLACEHOLDER = re.compile(r"\$\{([^{}]+)\}")


def stringify_value(value: VariableValue) -> str:
    """Render a variable value the way scenario authors write it.

    Booleans become ``true``/``false`` and integral floats lose their ``.0``
    unless they are large enough to print in exponent form.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < EXPONENT_THRESHOLD:
        return str(int(value))
    if value is None:
        return ""
    return str(value)


def substitute_variables(text: str | None, variables: Mapping[str, Variable]) -> str:
    """Replace ``${name}`` placeholders with current variable values.

    Args:
        text: Template text. ``None`` is treated as empty.
        variables: Variables keyed by name.

    Returns:
        The substituted text. Unknown placeholders are left unchanged.
        Returns ``TOO_LONG_MARKER`` if expansion grows past ``MAX_LENGTH``.
    """
    if not text:
        return ""

    # First declared name wins when two differ only by case
    by_lower_name: dict[str, Variable] = {}
    for name, variable in variables.items():
        by_lower_name.setdefault(name.lower(), variable)

    def _replace(match: re.Match[str]) -> str:
        variable = by_lower_name.get(match.group(1).lower())
        if variable is None:
            return match.group(0)
        return stringify_value(variable.value)

    result = text
    for _ in range(MAX_PASSES):
        if "${" not in result:
            break
        expanded = _PLACEHOLDER.sub(_replace, result)
        if len(expanded) > MAX_LENGTH:
            return TOO_LONG_MARKER
        if expanded == result:
            break
        result = expanded

    return result

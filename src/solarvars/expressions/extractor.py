"""Variable reference extraction for authoring tools.

Scans the raw expression text, not the token stream, so a malformed
expression still yields whatever complete ``[name]`` spans it contains.
"""

import re

# Matches up to the first closing bracket; "[a[b]" yields "a[b".
VARIABLE_PATTERN = re.compile(r"\[([^\]]+)\]")


def extract_variables(expression: str) -> set[str]:
    """Return the set of variable names referenced in an expression.

    Names are trimmed. Blank references such as ``[ ]`` are left out on
    purpose, even though the lexer reads them as the empty name.
    Never raises.
    """
    if not isinstance(expression, str):
        return set()

    names = (match.group(1).strip() for match in VARIABLE_PATTERN.finditer(expression))
    return {name for name in names if name}

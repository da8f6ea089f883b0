"""Line predicates for C# attribute lines."""

HTTP_VERBS = ("HttpGet", "HttpPost", "HttpPut", "HttpDelete", "HttpPatch")

VERB_PREFIXES = tuple(prefix for verb in HTTP_VERBS for prefix in (f"[{verb}]", f"[{verb}("))
"""Bare and parameterized form of every verb, e.g. `[HttpGet]` and `[HttpGet(`."""

AUTHORIZE_PREFIX = "[Authorize"

BLOCK_DELIMITER = "["


def is_verb_attribute(line: str) -> bool:
    return line.strip().startswith(VERB_PREFIXES)


def is_authorize_attribute(line: str) -> bool:
    # Open-ended on purpose: `[Authorize]`, `[Authorize(Roles = "x")]` and `[AuthorizeFoo]` all match.
    return line.strip().startswith(AUTHORIZE_PREFIX)


def is_attribute_line(line: str) -> bool:
    return line.strip().startswith(BLOCK_DELIMITER)


def leading_whitespace(line: str) -> str:
    """Return the run of spaces and tabs at the start of `line`."""
    for i, char in enumerate(line):
        if char not in " \t":
            return line[:i]
    return line

"""Small string helpers."""


def is_empty_or_whitespace(text: str) -> bool:
    """True if ``text`` is empty or holds only whitespace characters."""
    return not text or text.isspace()
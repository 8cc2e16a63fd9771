import re

_SPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace to a single space and trim the ends."""
    return _SPACE_RE.sub(" ", text).strip()


def cut(text: str, start: int, end: int) -> str:
    """Remove text[start:end], leaving a space so neighbours never fuse."""
    return f"{text[:start]} {text[end:]}"

"""Small text helpers shared by the transclusion and metadata code."""

_NEWLINES = "\r\n"


def trim_newlines(text: str) -> str:
    """Strip leading and trailing line breaks, leaving other whitespace alone."""
    return text.strip(_NEWLINES)

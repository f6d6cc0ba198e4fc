# answerlens/domain/logic/text_normalizer.py
import re

_WHITESPACE = re.compile(r"\s+")
# Curly single and double quotes, opening and closing, including low-9 forms
_SMART_QUOTES = re.compile("[\u2018\u2019\u201a\u201b\u201c\u201d\u201e\u201f]")


def normalize(raw: str) -> str:
    """Canonicalize recognized text: drop all whitespace, straighten smart quotes."""
    if not raw:
        return ""
    text = _WHITESPACE.sub("", raw)
    text = _SMART_QUOTES.sub('"', text)
    return text.strip()

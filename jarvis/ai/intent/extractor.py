"""
Response Extractor - Isolate the JSON object inside raw model output.

Text models often wrap JSON in markdown fences or a sentence of prose,
even when asked not to. This is a best-effort normalizer, not a parser:

1. Drop every ``` fence marker (with its optional language tag)
2. Trim whitespace
3. Keep the slice from the first "{" to the last "}" inclusive

It assumes one JSON object per response. Nested objects are fine since
only the outermost braces matter. When there are no braces the stripped
text is returned unchanged so that json.loads fails loudly downstream.
"""

import re

# ``` optionally followed by a language tag such as json, JSON, javascript
_FENCE_RE = re.compile(r"```[A-Za-z0-9_-]*")


def strip_code_fences(raw: str) -> str:
    """Remove all code-fence markers and surrounding whitespace."""
    return _FENCE_RE.sub("", raw).strip()


def extract_json(raw: str) -> str:
    """
    Return the best-guess JSON substring of a model response.

    Example:
        >>> extract_json('```json\\n{"a":1}\\n```')
        '{"a":1}'
        >>> extract_json('Claro! Aqui está: {"a": {"b": 2}} Espero ter ajudado.')
        '{"a": {"b": 2}}'
    """
    if not raw:
        return ""

    cleaned = strip_code_fences(raw)

    first = cleaned.find("{")
    last = cleaned.rfind("}")
    if first != -1 and last != -1 and first < last:
        return cleaned[first:last + 1]

    return cleaned

"""Isolate generated code from a free-form model reply.

Parsing rule:
    - The first triple-backtick fence opens a block; the next one closes it.
    - Text on the opening line is a language tag (`jsx`, `tsx`, `html`, ...)
      only when it is a single token and a newline follows it.
    - The trimmed interior of that first block is returned; surrounding prose
      is discarded.
    - Without a closed fence the trimmed input is returned unchanged.

Failure handling:
    Never raises. `None` and empty input yield an empty string.
"""

import re

FENCE = "```"

_LANGUAGE_TAG = re.compile(r"[\w.+#-]*")


def extract_code(text: str | None) -> str:
    """Return the first fenced block's content, or the whole trimmed text."""
    if not text:
        return ""

    start = text.find(FENCE)
    if start == -1:
        return text.strip()

    body_start = start + len(FENCE)
    end = text.find(FENCE, body_start)
    if end == -1:
        return text.strip()

    body = text[body_start:end]
    first_line, newline, rest = body.partition("\n")
    if newline and _LANGUAGE_TAG.fullmatch(first_line.strip()):
        body = rest

    return body.strip()

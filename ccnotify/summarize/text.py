"""Text helpers for summaries: markdown cleanup, first sentence, truncation."""

from __future__ import annotations

import re

_CODE_BLOCK = re.compile(r"```[\s\S]*?```")
_IMAGE = re.compile(r"!\[([^\]]*)\]\([^)]+\)")
_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_BOLD_STARS = re.compile(r"\*\*(?!\s)(.+?)(?<!\s)\*\*")
_BOLD_UNDERSCORES = re.compile(r"(?<!\w)__(?!\s)(.+?)(?<!\s)__(?!\w)")
_ITALIC_STAR = re.compile(r"\*(?!\s)([^*\n]+?)(?<!\s)\*")
# Word-bounded so snake_case identifiers survive
_ITALIC_UNDERSCORE = re.compile(r"(?<!\w)_(?!\s)([^_\n]+?)(?<!\s)_(?!\w)")
_HEADER = re.compile(r"^#+\s*")
_BULLET = re.compile(r"^[-*•]\s*")

SENTENCE_MIN_LENGTH = 20
SENTENCE_MAX_LENGTH = 200
NO_BOUNDARY_LENGTH = 100

_SENTENCE_ENDERS = (". ", "! ", "? ", ".\n", "!\n", "?\n")


def clean_markdown(text: str) -> str:
    """Flatten markdown into one line of plain text."""
    text = _CODE_BLOCK.sub("", text)
    text = _IMAGE.sub(r"\1", text)
    text = _LINK.sub(r"\1", text)
    text = _BOLD_STARS.sub(r"\1", text)
    text = _BOLD_UNDERSCORES.sub(r"\1", text)
    text = _ITALIC_STAR.sub(r"\1", text)
    text = _ITALIC_UNDERSCORE.sub(r"\1", text)

    lines = []
    for line in text.splitlines():
        line = _HEADER.sub("", line.strip(), count=1)
        line = _BULLET.sub("", line, count=1).strip()
        if line:
            lines.append(line)
    return " ".join(lines)


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def extract_first_sentence(text: str) -> str:
    """
    First sentence of ``text``.

    A "." next to a digit (3.11, v2.) or followed by a non-space character
    (e.g., example.com) does not end a sentence. A first sentence shorter
    than 20 characters is joined with the next one unless that would reach
    200 characters, in which case the short sentence is returned alone. A
    first sentence that is itself 200 characters or longer is returned whole,
    never dropped to "". Without any sentence end the first 100 characters
    are returned.
    """
    sentences = []
    start = 0
    n = len(text)

    for i, ch in enumerate(text):
        if ch not in ".!?":
            continue
        if ch == ".":
            if i > 0 and _is_digit(text[i - 1]):
                continue
            if i + 1 < n and (_is_digit(text[i + 1]) or not text[i + 1].isspace()):
                continue

        sentence = text[start:i + 1].strip()
        if not sentence:
            continue
        sentences.append(sentence)
        start = i + 1

        total = len(" ".join(sentences))
        if len(sentences) == 1 and total < SENTENCE_MIN_LENGTH:
            continue
        if total >= SENTENCE_MAX_LENGTH and len(sentences) > 1:
            return " ".join(sentences[:-1])
        return " ".join(sentences)

    if sentences:
        return " ".join(sentences)

    return text[:NO_BOUNDARY_LENGTH]


def truncate_text(text: str, max_len: int) -> str:
    """
    Shorten ``text`` to at most ``max_len`` characters.

    Prefers a sentence end past the first third, then a word boundary past
    the middle (with "..."), then a hard cut (with "...").
    """
    if len(text) <= max_len:
        return text
    if max_len <= 3:
        return text[:max(max_len, 0)]

    search = text[:max_len]
    for ender in _SENTENCE_ENDERS:
        pos = search.rfind(ender)
        if pos > max_len // 3:
            return search[:pos + 1].strip()

    truncated = text[:max_len - 3]
    last_space = truncated.rfind(" ")
    if last_space > max_len // 2:
        return truncated[:last_space] + "..."

    return truncated + "..."

# ABOUTME: Cleanup heuristics for catalog titles and author labels.
# ABOUTME: Strips subtitles, life dates, and inverted "Last, First" author names.

import re

# Subtitle or parallel title: everything from the first ":" or "=" on.
_SUBTITLE_RE = re.compile(r"\s*[:=]")
_PARENTHETICAL_RE = re.compile(r"\(.*?\)")
# Life dates trailing an author label, e.g. "Eco, Umberto, 1932-2016".
_TRAILING_DATES_RE = re.compile(r",\s*\d+.*$")
_WHITESPACE_RE = re.compile(r"\s+")


def _capitalize_words(text: str) -> str:
    """Uppercase the first letter of each space-separated word, lowercase the rest."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))


def clean_title(title: str) -> str:
    """Drop any subtitle and normalize capitalization.

    >>> clean_title("the NAME of the rose : a novel")
    'The Name Of The Rose'
    """
    main_title = _SUBTITLE_RE.split(title, maxsplit=1)[0].strip()
    return _capitalize_words(main_title)


def clean_author(author: str | None) -> str | None:
    """Turn a catalog author label into a display name.

    Removes parenthetical qualifiers, trailing life dates, and periods, then
    flips "Last, First" into "First Last".
    """
    if not author:
        return None

    cleaned = _PARENTHETICAL_RE.sub("", author)
    cleaned = _TRAILING_DATES_RE.sub("", cleaned)
    cleaned = cleaned.replace(".", "")
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()

    if "," in cleaned:
        last, first = (part.strip() for part in cleaned.split(",", 2)[:2])
        cleaned = f"{first} {last}".strip()

    return _capitalize_words(cleaned) or None

"""
Skip policy: decides whether a leaf string is translatable content.

Identifiers, URLs, media paths, emails, timestamps, numbers, status
enums and too-short strings are structural data and stay untouched.
Existing stored exclusions depend on these rules, so they must not drift.

The patterns use ASCII digits, an explicit whitespace class and ``\\Z``
end anchors: ``$`` would also match before a trailing newline, and the
Unicode ``\\d``/``\\s`` classes are wider than the rules allow.
"""

from __future__ import annotations

import re

DEFAULT_MIN_STRING_LENGTH = 3

STATUS_VALUES = frozenset({"archived", "draft", "pending", "published"})

# Whitespace and line terminators as ECMAScript defines them.
WHITESPACE = (
    "\t\n\v\f\r \u00a0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)

_NON_WS = "[^" + re.escape(WHITESPACE) + "]"
_NON_WS_AT = "[^" + re.escape(WHITESPACE) + "@]"
_NON_WS_DOT_AT = "[^" + re.escape(WHITESPACE) + ".@]"

_OBJECT_ID = re.compile(r"^[a-f0-9]{24}\Z", re.IGNORECASE | re.ASCII)
_URL = re.compile(r"^https?://")
_MEDIA_PATH = re.compile(
    "^/" + _NON_WS + r"*\.(jpg|jpeg|png|gif|webp|svg|pdf|mp4|webm|ogg|mp3|wav)\Z",
    re.IGNORECASE | re.ASCII,
)
_EMAIL = re.compile(
    "^" + _NON_WS_AT + "+@" + _NON_WS_AT + _NON_WS_DOT_AT + r"*\." + _NON_WS_AT + r"+\Z"
)
# Prefix match: anything may follow the seconds.
_ISO_TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}", re.ASCII)
_DATETIME = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\Z", re.ASCII)
_PERCENTAGE = re.compile(r"^\d+%\Z", re.ASCII)
_INTEGER = re.compile(r"^\d+\Z", re.ASCII)

_VALUE_PATTERNS = (
    _OBJECT_ID,
    _URL,
    _MEDIA_PATH,
    _EMAIL,
    _ISO_TIMESTAMP,
    _DATETIME,
    _PERCENTAGE,
    _INTEGER,
)


def should_skip(value: str, path: str, min_length: int = DEFAULT_MIN_STRING_LENGTH) -> bool:
    """
    Return True when ``value`` at ``path`` must not be sent for translation.

    Args:
        value: The leaf string
        path: Its path in the document
        min_length: Strings shorter than this after trimming are skipped
    """
    if any(pattern.search(value) for pattern in _VALUE_PATTERNS):
        return True

    trimmed = value.strip(WHITESPACE)
    if not trimmed or len(trimmed) < min_length:
        return True

    if value.lower() in STATUS_VALUES:
        return True

    path_lower = path.lower()
    return (
        path_lower.endswith("id")
        or path_lower.endswith("_id")
        or "createdat" in path_lower
        or "updatedat" in path_lower
    )

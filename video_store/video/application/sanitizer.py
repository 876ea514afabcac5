"""
Filename sanitization for client-supplied upload names.
"""

import re
import unicodedata

FALLBACK_BASENAME = "video"
MAX_BASENAME_LENGTH = 100
MAX_EXTENSION_LENGTH = 10

# Union of the characters Windows and POSIX refuse in a filename, so the
# result does not depend on the host
_ILLEGAL_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_WHITESPACE = re.compile(r"\s+")
_UNSAFE_CHARS = re.compile(r"[^\w.\-]")


def _split_extension(name: str):
    index = name.rfind(".")
    if index <= 0 or index == len(name) - 1:
        return name, ""
    extension = name[index:]
    if len(extension) - 1 > MAX_EXTENSION_LENGTH:
        # Too long to be a real extension; truncated with the rest of the name
        return name, ""
    return name[:index], extension


def sanitize_filename(raw_filename: str) -> str:
    """Turn an untrusted filename into a safe on-disk name.

    Always returns a non-empty string whose base name is at most 100
    characters. Collisions are not prevented here; the media store prefixes a
    unique token at write time.
    """
    name = unicodedata.normalize("NFC", raw_filename or "")

    name = _ILLEGAL_CHARS.sub("", name)
    name = _WHITESPACE.sub("_", name)
    name = _UNSAFE_CHARS.sub("", name)

    # "." and ".." style names would name a directory
    if not name.strip("."):
        name = FALLBACK_BASENAME

    base, extension = _split_extension(name)
    if len(base) > MAX_BASENAME_LENGTH:
        base = base[:MAX_BASENAME_LENGTH]

    return base + extension

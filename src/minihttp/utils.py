import codecs
import functools
import re
import typing

import chardet

CHUNK_SIZE = 65536
CONNECT_REPLY_SIZE = 1024
DEFAULT_TIMEOUT = 30

# RFC 7230 'token', used for both method names and header names.
_TOKEN_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_FORBIDDEN_VALUE_CHARS = ("\r", "\n", "\x00")


def is_token(value: str) -> bool:
    return bool(_TOKEN_RE.match(value))


def is_valid_header_value(value: str) -> bool:
    return not any(char in value for char in _FORBIDDEN_VALUE_CHARS)


class MimeType(typing.NamedTuple):
    type: str
    subtype: str
    suffix: str
    parameters: typing.Dict[str, typing.Optional[str]]

    def __str__(self) -> str:
        """Renders the mime type without parameters"""
        if not self.type:
            return ""
        return (
            f"{self.type}"
            f"{'/' + self.subtype if self.subtype else ''}"
            f"{'+' + self.suffix if self.suffix else ''}"
        )


def parse_mimetype(mimetype: str) -> MimeType:
    if not mimetype:
        return MimeType(type="", subtype="", suffix="", parameters={})

    parts = mimetype.split(";")
    params: typing.Dict[str, typing.Optional[str]] = {}
    for item in parts[1:]:
        if not item.strip():
            continue
        key, _, value = item.partition("=")
        params[key.lower().strip()] = value.strip(' "') if value else None

    essence = parts[0].strip().lower()
    type, _, subtype = essence.partition("/")
    subtype, _, suffix = subtype.partition("+")
    return MimeType(type=type, subtype=subtype, suffix=suffix, parameters=params)


@functools.lru_cache(128)
def is_known_encoding(encoding: str) -> typing.Optional[str]:
    """Given an encoding type, return either it's normalized name
    if we understand the codec otherwise return 'None'.
    """
    try:
        return codecs.lookup(encoding).name
    except LookupError:
        return None


def detect_encoding(data: bytes) -> str:
    """Guesses the encoding of a body with no declared charset.
    Falls back to 'utf-8' when chardet isn't able to decide.
    """
    if not data:
        return "ascii"
    result = chardet.detect(data)
    encoding = result.get("encoding")
    if encoding:
        return is_known_encoding(encoding) or "utf-8"
    return "utf-8"

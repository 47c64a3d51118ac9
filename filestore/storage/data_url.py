"""
Helpers for inline data-urls and content-addressed filenames.

A data-url embeds a media type and a base64 payload in one string:
``data:<type>/<subtype>;base64,<payload>``.
"""
import base64
import hashlib
import re

from filestore.storage.exceptions import InvalidInputError

DATA_MARKER = "data:"
BASE64_MARKER = "base64,"

_NON_BASE64_CHARS = re.compile(r"[^A-Za-z0-9+/]")
_URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


def split_data_url(value: str) -> tuple[str, str] | None:
    """
    Split a data-url into its extension and base64 payload.

    The extension is the media subtype, taken verbatim
    (``data:image/svg+xml;base64,...`` gives ``svg+xml``).

    Args:
        value: String expected to contain both the ``data:`` and
            ``;base64,`` markers

    Returns:
        (extension, payload) tuple, or None if a marker is missing or the
        media type is not terminated by ``;``
    """
    data_index = value.find(DATA_MARKER)
    base64_index = value.find(BASE64_MARKER)
    if data_index == -1 or base64_index <= data_index:
        return None
    if value[base64_index - 1] != ";":
        return None

    # e.g. "image/png" between "data:" and ";base64,"
    media_type = value[data_index + len(DATA_MARKER):base64_index - 1]
    _, _, extension = media_type.partition("/")

    payload = value[base64_index + len(BASE64_MARKER):]
    return extension, payload


def is_data_url(value: str) -> bool:
    return value.startswith(DATA_MARKER) and BASE64_MARKER in value


def decode_base64(data: str | bytes) -> bytes:
    """
    Decode base64 the lenient way browsers and most encoders expect.

    Characters outside the alphabet are ignored, decoding stops at the first
    padding character, url-safe characters are accepted and a dangling
    single character at the end is dropped.

    Raises:
        InvalidInputError: If bytes input is not ASCII
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("ascii")
        except UnicodeDecodeError as e:
            raise InvalidInputError("Base64 content must be ASCII") from e

    text = data.split("=", 1)[0].translate(_URLSAFE_TO_STANDARD)
    text = _NON_BASE64_CHARS.sub("", text)

    remainder = len(text) % 4
    if remainder == 1:
        text = text[:-1]
    elif remainder:
        text += "=" * (4 - remainder)

    return base64.b64decode(text)


def generate_filename(content: bytes, extension: str) -> str:
    """
    Derive a content-addressed filename: ``<md5 hex digest>.<extension>``.

    Identical content with an identical extension always maps to the same
    filename.
    """
    return f"{hashlib.md5(content).hexdigest()}.{extension}"

"""
Unit tests for data-url parsing and content-addressed filenames.
"""
import hashlib

import pytest

from filestore.storage.data_url import (
    decode_base64,
    generate_filename,
    is_data_url,
    split_data_url,
)
from filestore.storage.exceptions import InvalidInputError
from tests.constants import GIF_BYTES, GIF_DATA_URL


def test_split_data_url():
    assert split_data_url("data:image/png;base64,AAAA") == ("png", "AAAA")


def test_split_data_url_keeps_subtype_verbatim():
    """Subtypes are used as extensions without normalization."""
    extension, _ = split_data_url("data:image/svg+xml;base64,PHN2Zz4=")
    assert extension == "svg+xml"

    extension, _ = split_data_url("data:application/vnd.ms-excel;base64,AAAA")
    assert extension == "vnd.ms-excel"


@pytest.mark.parametrize(
    "value",
    [
        "image/png;base64,AAAA",
        "data:image/png,AAAA",
        "data:image/pngbase64,AAAA",
        "just a file name.png",
        "",
    ],
)
def test_split_data_url_requires_both_markers(value):
    assert split_data_url(value) is None


def test_is_data_url():
    assert is_data_url(GIF_DATA_URL) is True
    assert is_data_url("images/logo.gif") is False
    # The "data:" marker must come first
    assert is_data_url("x-data:image/gif;base64,AAAA") is False


def test_decode_base64_drops_dangling_character():
    """A trailing single character cannot form a byte and is ignored."""
    _, payload = split_data_url(GIF_DATA_URL)
    assert decode_base64(payload) == GIF_BYTES


def test_decode_base64_accepts_missing_padding_and_urlsafe():
    assert decode_base64("aGk") == b"hi"
    assert decode_base64("-_8") == b"\xfb\xff"
    assert decode_base64(b"aGVs\nbG8=") == b"hello"


def test_decode_base64_rejects_non_ascii_bytes():
    with pytest.raises(InvalidInputError):
        decode_base64("héllo".encode("utf-8"))


def test_generate_filename_is_content_addressed():
    expected = hashlib.md5(GIF_BYTES).hexdigest() + ".gif"

    assert generate_filename(GIF_BYTES, "gif") == expected
    assert generate_filename(GIF_BYTES, "gif") == generate_filename(GIF_BYTES, "gif")
    assert generate_filename(GIF_BYTES, "png") != expected
    assert generate_filename(b"other", "gif") != expected

import json

import pytest

from JsonShare.core.errors import PayloadTooLarge
from JsonShare.core.validation import check_content_length, check_size, is_json_filename, validate_json


@pytest.mark.parametrize(
    "content",
    [
        b'{"a":1}',
        b"[1, 2, 3]",
        b'"just a string"',
        b"42",
        b"null",
        b"  {\n  \"nested\": {\"list\": [true, false, null]}\n}  \n",
        '{"name": "Zoë"}'.encode("utf-8"),
    ],
)
def test_valid_json_passes(content):
    result = validate_json(content)
    assert result.ok
    assert result.reason is None


@pytest.mark.parametrize(
    "content",
    [
        b"not json",
        b"",
        b"   ",
        b'{"a":1',
        b'{"a":1} trailing',
        b"{'a': 1}",
        b"[1, 2,]",
        b"NaN",
        b'{"a": Infinity}',
        b"\xff\xfe{}",
        b'\xef\xbb\xbf{"a":1}',
        b'{"a": "\xc3"}',
    ],
)
def test_invalid_json_fails(content):
    result = validate_json(content)
    assert not result.ok
    assert result.reason


def test_deep_nesting_is_invalid_not_a_crash():
    content = b"[" * 100_000 + b"]" * 100_000
    assert validate_json(content).ok is False


def test_validation_does_not_touch_input():
    content = b'{ "b" : 2 ,"a":1 }'
    snapshot = bytes(content)
    validate_json(content)
    assert content == snapshot
    assert json.loads(content) == {"a": 1, "b": 2}


def test_json_filename_suffix():
    assert is_json_filename("data.json")
    assert not is_json_filename("data.txt")
    assert not is_json_filename("data.json.exe")
    assert not is_json_filename("")


def test_check_size():
    check_size(b"x" * 10, max_bytes=10)
    check_size(b"x" * 1000, max_bytes=0)
    with pytest.raises(PayloadTooLarge):
        check_size(b"x" * 11, max_bytes=10)


def test_check_content_length():
    check_content_length("100", max_bytes=50, overhead=50)
    check_content_length(None, max_bytes=10, overhead=0)
    check_content_length("not-a-number", max_bytes=10, overhead=0)
    check_content_length("10000", max_bytes=0, overhead=0)
    with pytest.raises(PayloadTooLarge):
        check_content_length("101", max_bytes=50, overhead=50)

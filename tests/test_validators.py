import pytest

from scribehub.errors import ResultValidationError, ValidationError
from scribehub.models.transcription import Segment, TranscriptionResult
from scribehub.utils.helpers import (
    FILENAME_SEPARATOR,
    build_file_name,
    sanitize_filename,
    split_file_name,
    upload_file_name,
)
from scribehub.utils.validators import (
    normalize_device,
    parse_beam_size,
    parse_hotwords,
    split_and_trim,
    validate_new_file_name,
    validate_result,
)


@pytest.mark.parametrize("device,expected", [
    ("cpu", "cpu"),
    ("cuda", "cuda"),
    ("gpu", "cpu"),
    ("", "cpu"),
    (None, "cpu"),
    ("CUDA", "cpu"),
])
def test_normalize_device(device, expected):
    assert normalize_device(device) == expected


@pytest.mark.parametrize("raw,expected", [
    ("5", 5),
    (" 3 ", 3),
    ("0", 0),
    ("abc", None),
    ("", None),
    (None, None),
    ("-2", None),
])
def test_parse_beam_size(raw, expected):
    assert parse_beam_size(raw) == expected


def test_split_and_trim_keeps_empty_elements():
    assert split_and_trim("a, b ,,c") == ["a", "b", "", "c"]
    assert split_and_trim(" , ") == ["", ""]


def test_parse_hotwords_filters_empty_elements():
    assert parse_hotwords("a, b ,,c") == ["a", "b", "c"]
    assert parse_hotwords(" , ,") == []
    assert parse_hotwords("") == []
    assert parse_hotwords(None) == []


def test_sanitize_filename():
    assert sanitize_filename('  "My Video: Part 1!". ') == "My_Video_Part_1_"
    assert sanitize_filename("...hidden.") == "hidden"
    assert sanitize_filename("already_clean") == "already_clean"
    assert sanitize_filename("a -- b") == "a_b"


def test_split_file_name_uses_first_separator():
    name = build_file_name("2024_01_01-120000000", f"talk{FILENAME_SEPARATOR}extra.mp3")
    assert split_file_name(name) == ("2024_01_01-120000000", f"talk{FILENAME_SEPARATOR}extra.mp3")
    assert split_file_name("no-separator.mp3") is None
    assert split_file_name("") is None


def test_upload_file_name_falls_back_to_timestamp():
    name = upload_file_name(None)
    prefix, human_part = split_file_name(name)
    assert prefix.startswith(human_part[:10])
    assert split_file_name(upload_file_name("talk.mp3"))[1] == "talk.mp3"


@pytest.mark.parametrize("result,field", [
    (TranscriptionResult(language="", text="x", segments=[Segment(text="x")]), "language"),
    (TranscriptionResult(language="en", text="", segments=[Segment(text="x")]), "text"),
    (TranscriptionResult(language="en", text="x", segments=[]), "segments"),
])
def test_validate_result_reports_missing_field(result, field):
    with pytest.raises(ResultValidationError) as exc_info:
        validate_result(result)
    assert exc_info.value.field == field
    assert str(exc_info.value) == f"Missing required field: {field}"


def test_validate_result_requires_result():
    with pytest.raises(ValidationError):
        validate_result(None)


@pytest.mark.parametrize("name", ["", None, "../escape.mp3", "dir/file.mp3", ".."])
def test_validate_new_file_name_rejects(name):
    with pytest.raises(ValidationError):
        validate_new_file_name(name)

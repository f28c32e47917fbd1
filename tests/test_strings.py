import pytest

from signalr_hub.strings import is_empty_or_whitespace


@pytest.mark.parametrize("text", ["", " ", "   ", "\t", "\n\r\t ", "\u3000", "\u00a0"])
def test_blank_strings(text):
    assert is_empty_or_whitespace(text) is True


@pytest.mark.parametrize("text", ["a", " a", "a ", " event ", "\tx\n", "_"])
def test_non_blank_strings(text):
    assert is_empty_or_whitespace(text) is False
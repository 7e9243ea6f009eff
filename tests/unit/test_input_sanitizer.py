"""InputSanitizer: text and file name cleaning."""

import pytest

from portal.shared.utils.sanitization import InputSanitizer


def test_sanitize_text_strips_tags_and_whitespace() -> None:
    assert InputSanitizer.sanitize_text("  <b>Acme</b> Coffee ") == "Acme Coffee"


def test_sanitize_text_drops_script_content() -> None:
    assert InputSanitizer.sanitize_text("<script>alert(1)</script>Hi") == "Hi"


@pytest.mark.parametrize("value", [None, "", "   ", "<p></p>"])
def test_sanitize_text_empty_becomes_none(value: str | None) -> None:
    assert InputSanitizer.sanitize_text(value) is None


@pytest.mark.parametrize(
    ("raw", "clean"),
    [
        ("logo.png", "logo.png"),
        ("C:\\Users\\ada\\final v2.pdf", "final v2.pdf"),
        ("../../etc/passwd", "passwd"),
        ("brand<guide>.pdf", "brand_guide_.pdf"),
        ("nul\x00byte.png", "nulbyte.png"),
    ],
)
def test_sanitize_filename(raw: str, clean: str) -> None:
    assert InputSanitizer.sanitize_filename(raw) == clean


def test_sanitize_filename_caps_length_keeping_extension() -> None:
    name = InputSanitizer.sanitize_filename("a" * 300 + ".png")
    assert len(name) == InputSanitizer.MAX_FILENAME_LENGTH
    assert name.endswith(".png")


@pytest.mark.parametrize("raw", ["", "..", "dir/", "."])
def test_sanitize_filename_rejects_empty(raw: str) -> None:
    with pytest.raises(ValueError):
        InputSanitizer.sanitize_filename(raw)

import pytest

from statusblocks.formatting import (
    Fragment,
    FormatError,
    IncompatibleFormatter,
    Metadata,
    PlaceholderNotFound,
    State,
)


def test_state_from_config_names():
    names = ["warning", "critical", "good", "info", "idle"]
    assert [State(name).value for name in names] == names


def test_unknown_state_rejected():
    with pytest.raises(ValueError):
        State("bright")


def test_metadata_default():
    assert Metadata().is_default()
    assert not Metadata(italic=True).is_default()
    assert not Metadata(instance="x").is_default()


@pytest.mark.parametrize(
    ("italic", "underline", "expected"),
    [
        (True, True, "<i><u>t</u></i>"),
        (False, True, "<u>t</u>"),
        (True, False, "<i>t</i>"),
        (False, False, "t"),
    ],
)
def test_formatted_text(italic, underline, expected):
    frag = Fragment("t", Metadata(italic=italic, underline=underline))
    assert frag.formatted_text() == expected


def test_fragment_default_metadata():
    frag = Fragment("abc")
    assert frag.metadata.is_default()
    assert frag.formatted_text() == "abc"


def test_placeholder_not_found_message():
    err = PlaceholderNotFound("percentage")
    assert isinstance(err, FormatError)
    assert str(err) == "Placeholder 'percentage' not found"
    assert err.name == "percentage"


def test_incompatible_formatter_message():
    err = IncompatibleFormatter("Text", "eng")
    assert str(err) == "Text cannot be formatted with 'eng' formatter"
    with pytest.raises(FormatError):
        raise err
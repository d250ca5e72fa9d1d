import pytest

from statusblocks.errors import BlockError


def test_message_only():
    assert str(BlockError("Failed to read state file")) == "Failed to read state file"


def test_missing_message_uses_generic_text():
    assert str(BlockError()) == "Error"


def test_cause_is_appended():
    err = BlockError("Forecast request failed", ValueError("bad json"))
    assert str(err) == "Forecast request failed. Cause: bad json"
    assert err.cause.args == ("bad json",)


def test_cause_without_message():
    err = BlockError(None, KeyError("k"))
    assert str(err).startswith("Error. Cause: ")


def test_is_raisable_and_chains():
    cause = OSError("no such file")
    with pytest.raises(BlockError) as info:
        raise BlockError("Failed", cause)
    assert info.value.__cause__ is cause
    assert info.value.message == "Failed"
"""Tests for range validation and error types."""

import pytest
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from midiscope.utils.validation import (
    InvalidInputError,
    MidiError,
    ParseIssue,
    ValueOutOfRangeError,
    validate_number,
)


class TestValidateNumber:
    """Test cases for validate_number."""

    @pytest.mark.parametrize("value", [0, 64, 127])
    def test_values_in_range(self, value):
        """Test that boundaries and inner values pass."""
        assert validate_number(value, 0, 127, "Velocity") == value

    @pytest.mark.parametrize("value", [-1, 128])
    def test_values_out_of_range(self, value):
        """Test that min-1 and max+1 fail."""
        with pytest.raises(ValueOutOfRangeError, match="Velocity must be 0-127"):
            validate_number(value, 0, 127, "Velocity")

    def test_error_carries_details(self):
        """Test the label and limits on the raised error."""
        with pytest.raises(ValueOutOfRangeError) as excinfo:
            validate_number(16, 0, 15, "Channel")

        error = excinfo.value
        assert error.label == "Channel"
        assert error.minimum == 0
        assert error.maximum == 15
        assert error.value == 16
        assert isinstance(error, MidiError)

    def test_non_integer_rejected(self):
        """Test that strings and booleans are not numbers."""
        with pytest.raises(InvalidInputError):
            validate_number("5", 0, 10, "Value")
        with pytest.raises(InvalidInputError):
            validate_number(True, 0, 10, "Value")


class TestParseIssue:
    """Test cases for non-fatal issues."""

    def test_str_is_message(self):
        """Test that an issue prints as its message."""
        issue = ParseIssue("TrackCountMismatch", "Header declares 2 tracks", 2, 1)
        assert str(issue) == "Header declares 2 tracks"
        assert issue.expected == 2
        assert issue.actual == 1

"""
Tests for shared-secret authentication and core helpers.


Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from datetime import datetime
from unittest.mock import Mock, patch

import pytest

from helpqueue.core.auth import SharedSecretAuthenticator
from helpqueue.core.terminal import clear_screen
from helpqueue.core.types import format_duration, format_timestamp
from helpqueue.exceptions import AuthenticationFailedError, HelpQueueError


class TestSharedSecretAuthenticator:
    """Test the shared-secret check."""

    def test_accepts_matching_secret(self):
        """Test the right secret passes silently."""
        reader = Mock(return_value="53rocks")
        SharedSecretAuthenticator("53rocks", reader=reader)()
        reader.assert_called_once_with("Enter password:")

    def test_rejects_wrong_secret(self):
        """Test a wrong secret raises AuthenticationFailedError."""
        auth = SharedSecretAuthenticator("53rocks", reader=Mock(return_value="guess"))
        with pytest.raises(AuthenticationFailedError, match="Invalid password."):
            auth()

    def test_eof_counts_as_wrong_secret(self):
        """Test closed input is treated as a failed attempt."""
        auth = SharedSecretAuthenticator("53rocks", reader=Mock(side_effect=EOFError))
        with pytest.raises(AuthenticationFailedError):
            auth()

    def test_uses_getpass_by_default(self):
        """Test the default reader does not echo."""
        with patch("getpass.getpass", return_value="s3cret") as mock_getpass:
            auth = SharedSecretAuthenticator("s3cret", prompt="pw:")
            auth()
        mock_getpass.assert_called_once_with("pw:")


class TestFormatting:
    """Test timestamp and duration formatting."""

    def test_timestamp_format(self):
        """Test timestamps use day/month/year hour:minute."""
        assert format_timestamp(datetime(2024, 2, 3, 9, 5)) == "03/02/2024 09:05"

    @pytest.mark.parametrize("seconds,expected", [
        (0.0, "0.000s"),
        (42.1084, "42.108s"),
        (125.0, "2m 05.000s"),
        (3725.5, "1h 02m 05.500s"),
        (-1.0, "0.000s"),
        (59.9996, "1m 00.000s"),
        (119.9999, "2m 00.000s"),
        (59.9994, "59.999s"),
    ])
    def test_duration_format(self, seconds, expected):
        """Test durations read naturally at every scale."""
        assert format_duration(seconds) == expected


class TestClearScreen:
    """Test the terminal wrapper."""

    def test_clear_failure_raises(self):
        """Test a failing clear command becomes a HelpQueueError."""
        with patch("helpqueue.core.terminal.subprocess.run", side_effect=OSError("no tty")):
            with pytest.raises(HelpQueueError, match="Failed to clear screen."):
                clear_screen()

    def test_clear_runs_command(self):
        """Test the platform command is run."""
        with patch("helpqueue.core.terminal.subprocess.run") as mock_run:
            clear_screen()
        mock_run.assert_called_once()

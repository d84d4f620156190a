"""
Tests for roster parsing.


Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

import pytest

from helpqueue.core.roster import import_roster, parse_roster_line
from helpqueue.core.types import Student
from helpqueue.exceptions import RosterLineError


class TestParseRosterLine:
    """Test parsing of single roster lines."""

    def test_fields_are_lowercased(self):
        """Test netid and names are lowercased."""
        net_id, student = parse_roster_line("Smith,John,JSmith,X\n", 1)
        assert net_id == "jsmith"
        assert student == Student(first="john", last="smith")

    def test_crlf_terminator(self):
        """Test Windows line endings are stripped."""
        net_id, student = parse_roster_line("Doe,Ann,adoe,001\r\n", 3)
        assert net_id == "adoe"
        assert student.last == "doe"

    def test_empty_fourth_field(self):
        """Test the ignored column may be empty."""
        net_id, _ = parse_roster_line("Kim,Bo,bkim,", 1)
        assert net_id == "bkim"

    @pytest.mark.parametrize("line", ["Smith,John,jsmith", "a,b,c,d,e", ""])
    def test_wrong_field_count(self, line):
        """Test lines without exactly four fields are rejected."""
        with pytest.raises(RosterLineError) as exc_info:
            parse_roster_line(line, 7)
        assert exc_info.value.line_number == 7
        assert exc_info.value.content == line
        assert "line 7" in str(exc_info.value)


class TestImportRoster:
    """Test importing several lines into a directory."""

    def test_counts_unique_netids(self):
        """Test the first occurrence of a duplicate netid wins."""
        directory = {}
        count = import_roster(directory, [
            "Smith,John,jsmith,X",
            "Doe,Ann,adoe,X",
            "Smythe,Jon,JSMITH,X",
        ])
        assert count == 2
        assert directory["jsmith"].first == "john"

    def test_error_reports_line_number(self):
        """Test the failing line is reported with its 1-based number."""
        with pytest.raises(RosterLineError, match="line 2"):
            import_roster({}, ["Smith,John,jsmith,X", "broken"])

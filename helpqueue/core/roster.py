"""
Roster parsing.

A roster is plain text with one student per line and four comma-separated
fields: last name, first name, netid and a column that is ignored. There is
no header row.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

from typing import Dict, Iterable, Tuple

from ..exceptions import RosterLineError
from .types import NetId, Student

ROSTER_FIELDS = 4


def parse_roster_line(line: str, line_number: int) -> Tuple[NetId, Student]:
    """
    Parse one roster line.

    Args:
        line: Raw line, with or without its terminator.
        line_number: 1-based line number used in error messages.

    Returns:
        Tuple of the lowercased netid and a student with an empty history.

    Raises:
        RosterLineError: If the line does not split into four fields.
    """
    content = line.rstrip("\r\n")
    parts = content.split(",")
    if len(parts) != ROSTER_FIELDS:
        raise RosterLineError(line_number, content)

    last, first, net_id, _unused = parts
    return net_id.strip().lower(), Student(
        first=first.strip().lower(), last=last.strip().lower()
    )


def import_roster(directory: Dict[NetId, Student], lines: Iterable[str]) -> int:
    """
    Fill ``directory`` from roster lines, first occurrence of a netid wins.

    The directory is filled in place, so entries parsed before a bad line
    stay in it. Callers that want all-or-nothing must pass a scratch dict.

    Args:
        directory: Student directory to populate.
        lines: Roster lines.

    Returns:
        Size of the directory afterwards.

    Raises:
        RosterLineError: On the first malformed line.
    """
    for line_number, line in enumerate(lines, start=1):
        net_id, student = parse_roster_line(line, line_number)
        directory.setdefault(net_id, student)
    return len(directory)

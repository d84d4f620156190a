"""
Terminal helpers.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

import os
import subprocess

from ..exceptions import HelpQueueError


def clear_screen() -> None:
    """
    Clear the controlling terminal.

    Raises:
        HelpQueueError: If the platform clear command fails.
    """
    command = ["cls"] if os.name == "nt" else ["clear"]
    try:
        subprocess.run(command, check=True, shell=os.name == "nt")
    except (OSError, subprocess.CalledProcessError) as e:
        raise HelpQueueError("Failed to clear screen.") from e

"""
Help queue engine.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from .help_queue import HelpQueue
from .help_queue_metrics import WaitStatistics

__all__ = ["HelpQueue", "WaitStatistics"]

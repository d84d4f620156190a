"""
Office-hours help queue: a console tool that keeps a FIFO line of students,
staff check-ins and wait-time history, mirrored to a JSON backup file.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

__version__ = "0.1.0"

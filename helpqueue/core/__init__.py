"""
Data model, persistence, roster parsing and authentication.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

"""
Shared-secret authentication for privileged commands.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

import getpass
import hmac
import logging
from typing import Callable, Optional

from ..exceptions import AuthenticationFailedError

logger = logging.getLogger("helpqueue.core.auth")

Authenticator = Callable[[], None]


class SharedSecretAuthenticator:
    """
    Prompt for the course secret and compare it to the configured value.

    Instances are plain callables so the queue can be given any other
    check with the same signature.
    """

    def __init__(
        self,
        secret: str,
        prompt: str = "Enter password:",
        reader: Optional[Callable[[str], str]] = None,
    ) -> None:
        """
        Initialize the authenticator.

        Args:
            secret: Expected secret.
            prompt: Text shown before reading the secret.
            reader: Function reading a line without echo, getpass by default.
        """
        self._secret = secret
        self.prompt = prompt
        self._reader = reader

    def __call__(self) -> None:
        """
        Block until a secret is entered and check it.

        Raises:
            AuthenticationFailedError: If the secret does not match.
        """
        try:
            supplied = (self._reader or getpass.getpass)(self.prompt)
        except EOFError:
            supplied = ""
        if not hmac.compare_digest(supplied.encode(), self._secret.encode()):
            logger.warning("Rejected privileged command: wrong secret")
            raise AuthenticationFailedError()

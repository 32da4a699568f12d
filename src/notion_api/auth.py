"""Authentication module for loading the Notion integration token.

This module loads the Notion API key from environment variables using
python-dotenv. It validates that the key is present and raises an
appropriate error before any request is made if it is missing.
"""

import os
from typing import Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError


class Authenticator:
    """Loads and validates the Notion API key.

    The key is loaded from a .env file using python-dotenv (or taken from the
    constructor) and is never logged.

    Required environment variables:
        NOTION_API_KEY: Internal integration secret (ntn_... or secret_...)

    Example:
        >>> auth = Authenticator()
        >>> headers = {"Authorization": f"Bearer {auth.get_api_key()}"}
    """

    ENV_VAR = 'NOTION_API_KEY'

    def __init__(self, api_key: Optional[str] = None):
        """Initialize the authenticator.

        Args:
            api_key: Explicit API key; when omitted the key is read from the
                     environment after loading .env
        """
        self._api_key = api_key.strip() if api_key else None
        if self._api_key is None:
            load_dotenv()

    def get_api_key(self) -> str:
        """Return the Notion API key.

        Raises:
            InvalidCredentialsError: If no key is configured
        """
        api_key = self._api_key or os.getenv(self.ENV_VAR, '').strip()
        if not api_key:
            raise InvalidCredentialsError(
                f"Notion API key not found. Set {self.ENV_VAR} in your "
                f"environment or .env file."
            )
        return api_key

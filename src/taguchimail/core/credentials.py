"""
Account credentials for TaguchiMail contexts.

An account is stored as a JSON object with ``username`` and ``password``
keys in a ``{NAME}_PASSWORD`` environment variable (``TAGUCHI_CREDENTIALS``
by default), so one deployment can hold several accounts side by side.
A ``.env`` file is loaded first when present.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..exceptions import CredentialError

logger = logging.getLogger(__name__)

DEFAULT_CREDENTIAL = "TAGUCHI_CREDENTIALS"
REQUIRED_KEYS = ("username", "password")


class CredentialManager:
    """Process-wide cache of TaguchiMail account credentials."""

    _instance: Optional["CredentialManager"] = None
    _credentials_cache: Dict[str, Dict[str, Any]] = {}
    _env_loaded: bool = False

    def __new__(cls) -> "CredentialManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not self._env_loaded:
            load_dotenv()
            self._env_loaded = True
            logger.debug("Loaded .env for TaguchiMail credentials")

    def get_account(self, name: str = DEFAULT_CREDENTIAL) -> Dict[str, Any]:
        """
        Return the account stored under ``{name}_PASSWORD``.

        Args:
            name: Credential name, e.g. 'TAGUCHI_CREDENTIALS' or
                'TAGUCHI_STAGING_CREDENTIALS'

        Returns:
            Dict with at least 'username' and 'password'

        Raises:
            CredentialError: If the variable is unset, not a JSON object,
                or lacks a required key
        """
        if name in self._credentials_cache:
            return self._credentials_cache[name]

        env_var = f"{name}_PASSWORD"
        raw = os.getenv(env_var)
        if raw is None:
            raise CredentialError(
                f"TaguchiMail credential not found: set {env_var} "
                f'to {{"username": ..., "password": ...}}'
            )

        try:
            account = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CredentialError(f"{env_var} is not valid JSON: {str(e)}") from e
        if not isinstance(account, dict):
            raise CredentialError(f"{env_var} must be a valid JSON object")

        missing = [key for key in REQUIRED_KEYS if key not in account]
        if missing:
            raise CredentialError(
                f"{env_var} missing required keys: {', '.join(missing)}"
            )

        self._credentials_cache[name] = account
        logger.debug(f"Loaded TaguchiMail account {account['username']} from {env_var}")
        return account

    def clear_cache(self) -> None:
        """Forget cached accounts so the next lookup re-reads the environment."""
        self._credentials_cache.clear()

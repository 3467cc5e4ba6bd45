"""Secure token storage in the OS keychain via keyring."""

import logging

import keyring
from keyring.errors import PasswordDeleteError

from hubox.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class CredentialStore:
    """Opaque save/get/delete of the GitHub token.

    Keychain failures other than "no such entry" propagate to the caller.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self._service_name = settings.keyring_service
        self._username = settings.keyring_username

    def save_token(self, token: str) -> None:
        keyring.set_password(self._service_name, self._username, token)
        logger.info("Stored token in keychain service %s", self._service_name)

    def get_token(self) -> str | None:
        return keyring.get_password(self._service_name, self._username)

    def delete_token(self) -> None:
        """Delete the stored token; deleting a missing token is not an error."""
        try:
            keyring.delete_password(self._service_name, self._username)
        except PasswordDeleteError:
            logger.debug("No token stored for %s, nothing to delete", self._service_name)

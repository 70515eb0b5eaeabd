"""OS-level keyring store using system credential stores.

Platform Support:
- macOS: Keychain
- Linux: Secret Service API (GNOME Keyring, KWallet)
- Windows: Windows Credential Locker
"""

import logging
from typing import cast

import keyring
from keyring.backends import fail
from keyring.errors import KeyringError, PasswordDeleteError

from issue_digest.exceptions import StoreError

logger = logging.getLogger(__name__)

SERVICE_PREFIX = "issue-digest"


class KeyringStore:
    """Credential storage in the OS keyring.

    Entries are namespaced under ``issue-digest/<name>`` so they do not
    collide with other tools using the same keychain.

    Example:
        >>> store = KeyringStore()
        >>> store.set("tracker-token", "abc123")
        True
        >>> store.get("tracker-token")
        'abc123'
    """

    @property
    def name(self) -> str:
        return "keyring"

    @property
    def available(self) -> bool:
        """Check if a functional keyring backend is configured.

        Headless systems without a secret service get keyring's ``fail``
        backend, which is reported as unavailable.
        """
        try:
            return not isinstance(keyring.get_keyring(), fail.Keyring)
        except Exception as e:
            logger.debug(f"Keyring not available: {e}")
            return False

    def get(self, name: str) -> str | None:
        """Retrieve a credential from the OS keyring.

        Raises:
            StoreError: If the keyring is unavailable or the lookup fails
        """
        if not self.available:
            raise StoreError(
                "Keyring backend is not available",
                name=name,
                suggestion="Export ISSUE_DIGEST_* variables or configure a keyring backend",
            )

        try:
            secret = cast(str | None, keyring.get_password(f"{SERVICE_PREFIX}/{name}", name))
        except KeyringError as e:
            raise StoreError(f"Keyring lookup failed: {e}", name=name) from e

        if secret is not None:
            logger.debug(f"Retrieved credential from keyring: {name}")

        return secret

    def set(self, name: str, secret: str) -> bool:
        """Store a credential in the OS keyring.

        Returns:
            True on success, False if the keyring is unavailable or refused the write
        """
        if not secret:
            logger.warning(f"Refusing to store empty credential: {name}")
            return False

        if not self.available:
            logger.warning(f"Keyring not available, credential not stored: {name}")
            return False

        try:
            keyring.set_password(f"{SERVICE_PREFIX}/{name}", name, secret)
        except KeyringError as e:
            logger.warning(f"Failed to store credential {name}: {e}")
            return False

        logger.info(f"Stored credential in keyring: {name}")
        return True

    def delete(self, name: str) -> bool:
        """Delete a credential from the OS keyring.

        Raises:
            StoreError: If the keyring is unavailable or the deletion fails
        """
        if not self.available:
            raise StoreError("Keyring backend is not available", name=name)

        try:
            keyring.delete_password(f"{SERVICE_PREFIX}/{name}", name)
        except PasswordDeleteError:
            # Credential doesn't exist - not an error
            return False
        except KeyringError as e:
            raise StoreError(f"Failed to delete credential: {e}", name=name) from e

        logger.info(f"Deleted credential from keyring: {name}")
        return True

"""Abstract protocol for credential storage."""

from typing import Protocol


class CredentialStore(Protocol):
    """Protocol defining the interface for credential stores.

    A store resolves a named credential (e.g. ``tracker-token``) to an
    opaque secret string. Absence and failure are reported differently:
    ``get`` returns None when there is no entry and raises StoreError when
    the lookup mechanism itself fails.
    """

    @property
    def name(self) -> str:
        """Store identifier (e.g., 'keyring', 'environment')."""
        ...

    @property
    def available(self) -> bool:
        """Check if this store is usable on the current system."""
        ...

    def get(self, name: str) -> str | None:
        """Retrieve a credential.

        Args:
            name: Credential name (e.g., 'tracker-token')

        Returns:
            Secret value or None if not found

        Raises:
            StoreError: If the store cannot be queried
        """
        ...

    def set(self, name: str, secret: str) -> bool:
        """Store a credential, overwriting any existing entry.

        Args:
            name: Credential name
            secret: Secret value

        Returns:
            True on success, False if the store could not be written
        """
        ...

    def delete(self, name: str) -> bool:
        """Delete a credential.

        Returns:
            True if deleted, False if not found or not deletable
        """
        ...

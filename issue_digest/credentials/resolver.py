"""Credential lookup across several stores with a fixed resolution order."""

import logging
from collections.abc import Sequence

from .backend import CredentialStore
from .environment_backend import EnvironmentStore
from .keyring_backend import KeyringStore

logger = logging.getLogger(__name__)


class ChainedStore:
    """Resolve credentials from the first store that has them.

    Reads try each available store in order (environment first, then the
    OS keyring by default). An unavailable store is skipped, but a store
    that is available and fails raises StoreError immediately so that a
    broken keyring is never mistaken for a missing credential.

    Writes go to a single store (the keyring by default), since an
    environment variable does not outlive the process.

    Example:
        >>> store = ChainedStore()
        >>> token = store.get("tracker-token")
    """

    def __init__(
        self,
        stores: Sequence[CredentialStore] | None = None,
        writer: CredentialStore | None = None,
    ) -> None:
        keyring_store = KeyringStore()
        self.stores: tuple[CredentialStore, ...] = (
            tuple(stores) if stores else (EnvironmentStore(), keyring_store)
        )
        self.writer: CredentialStore = writer or (self.stores[-1] if stores else keyring_store)

    @property
    def name(self) -> str:
        return "+".join(store.name for store in self.stores)

    @property
    def available(self) -> bool:
        return any(store.available for store in self.stores)

    def get(self, name: str) -> str | None:
        for store in self.stores:
            if not store.available:
                logger.debug(f"Skipping unavailable store {store.name} for {name}")
                continue

            secret = store.get(name)
            if secret is not None:
                return secret

        return None

    def set(self, name: str, secret: str) -> bool:
        return self.writer.set(name, secret)

    def delete(self, name: str) -> bool:
        return self.writer.delete(name)


class MemoryStore:
    """Process-local credential store backed by a dict.

    Used by the CLI's ``--test`` invocation mode so a run can be exercised
    end to end without touching the real keyring.
    """

    def __init__(self, secrets: dict[str, str] | None = None) -> None:
        self._secrets: dict[str, str] = dict(secrets or {})

    @property
    def name(self) -> str:
        return "memory"

    @property
    def available(self) -> bool:
        return True

    def get(self, name: str) -> str | None:
        return self._secrets.get(name)

    def set(self, name: str, secret: str) -> bool:
        if not secret:
            return False
        self._secrets[name] = secret
        return True

    def delete(self, name: str) -> bool:
        return self._secrets.pop(name, None) is not None

"""Credential stores for the upstream API tokens."""

from issue_digest.exceptions import CredentialError, MissingCredentialError, StoreError

from .backend import CredentialStore
from .environment_backend import EnvironmentStore, env_var_for
from .keyring_backend import KeyringStore
from .resolver import ChainedStore, MemoryStore

__all__ = [
    "ChainedStore",
    "CredentialError",
    "CredentialStore",
    "EnvironmentStore",
    "KeyringStore",
    "MemoryStore",
    "MissingCredentialError",
    "StoreError",
    "env_var_for",
]

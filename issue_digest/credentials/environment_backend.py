"""Environment variable store for CI and scripted runs."""

import logging
import os

logger = logging.getLogger(__name__)


def env_var_for(name: str) -> str:
    """Map a credential name to its environment variable.

    Example:
        >>> env_var_for("tracker-token")
        'ISSUE_DIGEST_TRACKER_TOKEN'
    """
    return "ISSUE_DIGEST_" + name.upper().replace("-", "_")


class EnvironmentStore:
    """Credential storage in environment variables.

    Changes made with ``set`` only affect the current process and its
    children. Useful where no keyring is available (CI, containers).
    """

    @property
    def name(self) -> str:
        return "environment"

    @property
    def available(self) -> bool:
        """Environment store is always available."""
        return True

    def get(self, name: str) -> str | None:
        value = os.getenv(env_var_for(name))

        if value:
            logger.debug(f"Retrieved credential from environment: {env_var_for(name)}")
            return value

        return None

    def set(self, name: str, secret: str) -> bool:
        if not secret:
            return False

        os.environ[env_var_for(name)] = secret
        logger.debug(f"Set environment variable: {env_var_for(name)}")
        return True

    def delete(self, name: str) -> bool:
        var_name = env_var_for(name)
        if var_name in os.environ:
            del os.environ[var_name]
            logger.debug(f"Deleted environment variable: {var_name}")
            return True
        return False

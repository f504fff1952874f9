"""Dependency injection container for p4relay.

Wires configuration into transports and executors explicitly instead of
through module-level state.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from p4relay.config import Config
from p4relay.services.api import P4API
from p4relay.services.executor import CommandExecutor
from p4relay.services.transport import SSHTransport


@dataclass
class Dependencies:
    """Container for p4relay dependencies.

    Holds the configuration and the API of the calling thread. Other
    threads get their own session through new_api().

    Example:
        deps = Dependencies.create()
        with deps.api:
            changes = deps.api.latest_change("//depot/main/...")
    """

    config: Config
    api: P4API
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    @classmethod
    def create(cls) -> "Dependencies":
        """Create dependencies with configuration from the environment.

        Returns:
            Initialized Dependencies instance
        """
        return cls.from_config(Config.from_env())

    @classmethod
    def from_config(
        cls,
        config: Config,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "Dependencies":
        """Create dependencies with custom configuration.

        Args:
            config: Custom Config instance
            sleep: Blocking sleep used between retries

        Returns:
            Dependencies with an API built from config
        """
        return cls(config=config, api=build_api(config, sleep), sleep=sleep)

    def new_api(self) -> P4API:
        """Build an API with its own session, for use on another thread."""
        return build_api(self.config, self.sleep)

    def cleanup(self) -> None:
        """Close the session of the default API."""
        self.api.executor.close()


def build_api(config: Config, sleep: Callable[[float], None] = time.sleep) -> P4API:
    """Build an unconnected P4API from configuration."""
    settings = config.settings
    transport = SSHTransport(
        host=config.relay_host(),
        params=config.connection_params(),
        known_hosts=config.host_keys.get_known_hosts_path(),
        p4_binary=settings.p4_binary,
        command_timeout=settings.command_timeout,
    )
    return P4API(CommandExecutor(transport, config.retry_policy(), sleep=sleep))

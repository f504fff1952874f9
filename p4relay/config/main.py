"""Application configuration.

Delegates to specialized components:
- SSHConfigParser: Resolves the relay host from ~/.ssh/config
- HostKeyVerifier: Manages known_hosts
- Settings: Environment variables
"""

import logging
from dataclasses import dataclass

from p4relay.config.host_keys import HostKeyVerifier
from p4relay.config.parser import SSHConfigParser
from p4relay.config.settings import Settings
from p4relay.models import ConnectionParams, SSHHost
from p4relay.services.executor import RetryPolicy

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Application configuration.

    Aggregates settings from the environment, the SSH config and
    known_hosts, and builds the explicit objects handed to executors.
    """

    settings: Settings
    parser: SSHConfigParser
    host_keys: HostKeyVerifier

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment.

        Returns:
            Configured instance with all components initialized
        """
        settings = Settings.from_env()
        return cls(
            settings=settings,
            parser=SSHConfigParser(),
            host_keys=HostKeyVerifier(
                known_hosts_path=settings.known_hosts,
                strict_checking=settings.strict_host_key_checking,
            ),
        )

    def connection_params(self) -> ConnectionParams:
        """Build the Perforce connection parameters."""
        return ConnectionParams(
            port=self.settings.p4port,
            user=self.settings.p4user,
            client=self.settings.p4client,
        )

    def retry_policy(self) -> RetryPolicy:
        """Build the retry and refresh policy."""
        return RetryPolicy(
            retries=self.settings.command_retries,
            delay=self.settings.retry_delay,
            refresh_threshold=self.settings.refresh_threshold,
        )

    def relay_host(self) -> SSHHost:
        """Resolve the relay host from settings and the SSH config."""
        host = self.parser.resolve(self.settings.ssh_host)
        logger.debug(
            "Relay host %s resolves to %s@%s:%d",
            host.name,
            host.user,
            host.connection_hostname,
            host.connection_port,
        )
        return host

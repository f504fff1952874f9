"""Configuration module for p4relay.

Provides focused classes for different configuration concerns:
- Config: Main configuration class (aggregates all components)
- SSHConfigParser: Resolves relay host aliases from ~/.ssh/config
- HostKeyVerifier: Manages SSH host key verification
- Settings: Environment variable configuration
"""

from p4relay.config.host_keys import HostKeyVerifier
from p4relay.config.main import Config
from p4relay.config.parser import SSHConfigParser
from p4relay.config.settings import Settings

__all__ = ["Config", "SSHConfigParser", "HostKeyVerifier", "Settings"]

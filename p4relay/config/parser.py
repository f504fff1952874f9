"""SSH config file parser.

Reads ~/.ssh/config so that the relay host can be given as an alias.
"""

import logging
import os
import re
from pathlib import Path

from p4relay.models import SSHHost
from p4relay.utils.hostname import is_localhost_target

logger = logging.getLogger(__name__)


class SSHConfigParser:
    """Parser for SSH config files.

    Only ``Host`` blocks with a ``HostName`` are kept. Settings under
    ``Host *`` apply as defaults to every later block.
    """

    def __init__(self, config_path: Path | str | None = None):
        """Initialize SSH config parser.

        Args:
            config_path: Path to SSH config file (default: ~/.ssh/config)
        """
        if config_path is None:
            config_path = Path.home() / ".ssh" / "config"
        self.config_path = Path(config_path)

    def parse(self) -> dict[str, SSHHost]:
        """Parse SSH config and return host definitions.

        Returns:
            Dictionary mapping host alias to SSHHost objects
        """
        if not self.config_path.exists():
            logger.debug("SSH config not found: %s", self.config_path)
            return {}

        try:
            content = self.config_path.read_text()
        except OSError as e:
            logger.warning("Cannot read SSH config %s: %s", self.config_path, e)
            return {}

        hosts: dict[str, SSHHost] = {}
        blocks: list[tuple[str, dict[str, str]]] = []
        global_defaults: dict[str, str] = {}
        current: dict[str, str] | None = None

        for line in content.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            host_match = re.match(r"^Host\s+(\S+)", line, re.IGNORECASE)
            if host_match:
                name = host_match.group(1)
                if "*" in name or "?" in name:
                    current = global_defaults if name == "*" else None
                else:
                    current = global_defaults.copy()
                    blocks.append((name, current))
                continue

            kv_match = re.match(r"^(\w+)\s+(.+)$", line)
            if kv_match and current is not None:
                key = kv_match.group(1).lower()
                value = kv_match.group(2).strip()
                if key == "identityfile":
                    value = os.path.expanduser(value)
                current[key] = value

        for name, data in blocks:
            if data.get("hostname"):
                hosts[name] = self._to_host(name, data)

        logger.debug("Parsed %d hosts from %s", len(hosts), self.config_path)
        return hosts

    def resolve(self, alias: str) -> SSHHost:
        """Look up an alias, falling back to treating it as a hostname.

        Args:
            alias: Host alias from the SSH config, or a plain hostname

        Returns:
            SSHHost for the relay
        """
        host = self.parse().get(alias)
        if host is not None:
            return host
        return SSHHost(
            name=alias,
            hostname=alias,
            user=os.getenv("USER", "root"),
            is_localhost=is_localhost_target(alias),
        )

    @staticmethod
    def _to_host(name: str, data: dict[str, str]) -> SSHHost:
        try:
            port = int(data.get("port", "22"))
        except ValueError:
            port = 22
        return SSHHost(
            name=name,
            hostname=data["hostname"],
            user=data.get("user", os.getenv("USER", "root")),
            port=port,
            identity_file=data.get("identityfile"),
            is_localhost=is_localhost_target(name),
        )

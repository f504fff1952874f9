"""p4relay: resilient Perforce command execution over a persistent SSH session."""

__version__ = "0.1.0"

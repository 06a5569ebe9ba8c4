"""
One-shot macOS workstation provisioning: SSH key and git identity setup, plus system defaults.
"""

__all__ = ["keypair", "preferences", "cli"]
__version__ = "0.1.0"

"""Errors that stop a provisioning run."""

from __future__ import annotations


class ProvisionError(Exception):
    """A fatal step failed; the run ends with ``exit_code``."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code

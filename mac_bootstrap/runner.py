"""Execute external commands and report their exit status."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
import subprocess
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND = 127


@dataclass
class CommandResult:
    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs commands synchronously with the terminal attached unless output is captured.

    The process environment is read at call time, so variables exported by an
    earlier step (for example the ssh-agent socket) reach later commands.
    """

    def run(
        self,
        args: Sequence[str],
        *,
        capture: bool = False,
        input_bytes: Optional[bytes] = None,
    ) -> CommandResult:
        argv = [str(arg) for arg in args]
        logger.debug("running: %s", " ".join(argv))
        try:
            completed = subprocess.run(
                argv,
                input=input_bytes,
                capture_output=capture,
                env=dict(os.environ),
                check=False,
            )
        except FileNotFoundError:
            logger.warning("command not found: %s", argv[0])
            return CommandResult(args=argv, returncode=COMMAND_NOT_FOUND, stderr=f"{argv[0]}: command not found")

        stdout = _decode(completed.stdout)
        stderr = _decode(completed.stderr)
        logger.debug("%s exited with %d", argv[0], completed.returncode)
        return CommandResult(args=argv, returncode=completed.returncode, stdout=stdout, stderr=stderr)


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")

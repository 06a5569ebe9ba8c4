"""Inspect the local machine: who is logged in, which host, which processes are running."""

from __future__ import annotations

from dataclasses import dataclass
import getpass
import logging
import os
from pathlib import Path
import re
import socket
from typing import Dict, List, Mapping, Optional

import psutil

logger = logging.getLogger(__name__)

_AGENT_VAR = re.compile(r"(SSH_AUTH_SOCK|SSH_AGENT_PID)=([^;\s]+)")


@dataclass
class HostIdentity:
    username: str
    hostname: str

    @property
    def key_name(self) -> str:
        return f"{self.username}-{self.hostname}"


def gather_identity() -> HostIdentity:
    """Return the logged-in user and the short host name (domain stripped)."""
    hostname = socket.gethostname().split(".")[0]
    return HostIdentity(username=getpass.getuser(), hostname=hostname)


def agent_reachable(environ: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if environ is None else environ
    sock = env.get("SSH_AUTH_SOCK")
    if not sock or not Path(sock).exists():
        return False
    pid = env.get("SSH_AGENT_PID")
    # launchd-managed agents on macOS export only the socket
    if pid and pid.isdigit():
        return psutil.pid_exists(int(pid))
    return True


def parse_agent_output(output: str) -> Dict[str, str]:
    """Extract the variables printed by ``ssh-agent -s``."""
    return {name: value for name, value in _AGENT_VAR.findall(output)}


def restart_processes(name: str) -> List[int]:
    """Terminate every process called ``name`` and return the pids that were signalled.

    Processes kept alive by launchd (Dock, Finder, SystemUIServer) come back on their own.
    """
    terminated: List[int] = []
    for proc in psutil.process_iter(["name"]):
        try:
            if proc.info["name"] != name:
                continue
            proc.terminate()
            terminated.append(proc.pid)
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            continue
    logger.debug("terminated %s: %s", name, terminated)
    return terminated

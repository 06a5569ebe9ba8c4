"""Write macOS preference flags, restart the Dock and bootstrap Homebrew."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import shutil
from typing import Callable, List, Optional, Sequence

from rich.console import Console

from .config import BootstrapConfig
from .formatting import StepOutcome, heading, info, outcome_table, success, warn
from .runner import CommandRunner
from .system_state import restart_processes

logger = logging.getLogger(__name__)


@dataclass
class PreferenceWrite:
    domain: str
    key: str
    value_type: str
    value: str
    description: str

    def command(self) -> List[str]:
        return ["defaults", "write", self.domain, self.key, f"-{self.value_type}", self.value]


DOCK_PREFERENCES: Sequence[PreferenceWrite] = (
    PreferenceWrite("com.apple.assistant.support", "Assistant Enabled", "bool", "false", "Disable Siri"),
    PreferenceWrite("com.apple.WindowManager", "GloballyEnabled", "bool", "false", "Disable Stage Manager"),
    PreferenceWrite("com.apple.dock", "wvous-tl-corner", "int", "0", "Disable top-left hot corner"),
    PreferenceWrite("com.apple.dock", "wvous-tr-corner", "int", "0", "Disable top-right hot corner"),
    PreferenceWrite("com.apple.dock", "wvous-bl-corner", "int", "0", "Disable bottom-left hot corner"),
    PreferenceWrite("com.apple.dock", "wvous-br-corner", "int", "0", "Disable bottom-right hot corner"),
    PreferenceWrite("com.apple.dock", "autohide", "bool", "true", "Autohide the Dock"),
    PreferenceWrite("com.apple.dock", "show-recents", "bool", "false", "Hide recent apps in the Dock"),
)

# written after the Dock restart
GLOBAL_PREFERENCES: Sequence[PreferenceWrite] = (
    PreferenceWrite("NSGlobalDomain", "_HIHideMenuBar", "bool", "true", "Always hide the menu bar"),
)

PREFERENCES: Sequence[PreferenceWrite] = tuple(DOCK_PREFERENCES) + tuple(GLOBAL_PREFERENCES)


def run_preference_setter(
    config: BootstrapConfig,
    runner: CommandRunner,
    console: Console,
    *,
    install_brew: bool = True,
    restart: Callable[[str], List[int]] = restart_processes,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> int:
    """Apply every preference in order; failures are reported, never fatal."""
    outcomes: List[StepOutcome] = []

    heading(console, "System settings")
    outcomes.extend(apply_preferences(runner, console, DOCK_PREFERENCES))
    outcomes.append(restart_dock(console, restart))
    outcomes.extend(apply_preferences(runner, console, GLOBAL_PREFERENCES))

    if install_brew:
        heading(console, "Homebrew")
        outcomes.append(install_homebrew(config, runner, console, which))

    console.print()
    console.print(outcome_table("Summary", outcomes))
    return 0


def apply_preferences(
    runner: CommandRunner, console: Console, preferences: Sequence[PreferenceWrite]
) -> List[StepOutcome]:
    outcomes: List[StepOutcome] = []
    for pref in preferences:
        result = runner.run(pref.command())
        if result.ok:
            info(console, f"{pref.description}: {pref.domain} {pref.key} = {pref.value}")
        else:
            warn(console, f"Could not write {pref.domain} {pref.key}.")
        outcomes.append(StepOutcome(pref.description, result.ok, f"{pref.domain} {pref.key}"))
    return outcomes


def restart_dock(console: Console, restart: Callable[[str], List[int]] = restart_processes) -> StepOutcome:
    pids = restart("Dock")
    if not pids:
        warn(console, "No running Dock process found; changes apply after the next login.")
        return StepOutcome("Restart the Dock", False, "Dock not running")
    success(console, "Dock restarted.")
    return StepOutcome("Restart the Dock", True, ", ".join(str(pid) for pid in pids))


def install_homebrew(
    config: BootstrapConfig,
    runner: CommandRunner,
    console: Console,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> StepOutcome:
    """Fetch the Homebrew installer and run it with bash, unless ``brew`` is already installed."""
    existing = which("brew")
    if existing:
        info(console, f"Homebrew already installed at {existing}; skipping.")
        return StepOutcome("Install Homebrew", True, "already installed")

    info(console, f"Downloading the Homebrew installer from {config.homebrew_install_url}...")
    fetched = runner.run(["curl", "-fsSL", config.homebrew_install_url], capture=True)
    if not fetched.ok or not fetched.stdout.strip():
        logger.debug("curl stderr: %s", fetched.stderr.strip())
        warn(console, "Could not download the Homebrew installer.")
        return StepOutcome("Install Homebrew", False, "download failed")

    installed = runner.run(["/bin/bash", "-c", fetched.stdout])
    if not installed.ok:
        warn(console, f"Homebrew installer exited with status {installed.returncode}.")
        return StepOutcome("Install Homebrew", False, f"exit status {installed.returncode}")

    success(console, "Homebrew installed.")
    return StepOutcome("Install Homebrew", True, "installed")

"""Fixed locations and URLs used by the provisioning tools."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_DOTFILES_REPO = "git@github.com:Minimal-Engine/.dotfiles.git"
DEFAULT_HOMEBREW_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
GITHUB_KEYS_URL = "https://github.com/settings/keys"
GITHUB_SSH_HOST = "git@github.com"
KEY_TYPE = "ed25519"

ENV_PREFIX = "MAC_BOOTSTRAP_"


@dataclass(frozen=True)
class BootstrapConfig:
    dotfiles_repo: str = DEFAULT_DOTFILES_REPO
    dotfiles_dir: Path = field(default_factory=lambda: Path.home() / ".dotfiles")
    ssh_dir: Path = field(default_factory=lambda: Path.home() / ".ssh")
    browser: str = "Safari"
    homebrew_install_url: str = DEFAULT_HOMEBREW_URL
    github_keys_url: str = GITHUB_KEYS_URL
    github_ssh_host: str = GITHUB_SSH_HOST

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BootstrapConfig":
        """Build a config from defaults, overridden by ``MAC_BOOTSTRAP_*`` variables."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            dotfiles_repo=env.get(f"{ENV_PREFIX}DOTFILES_REPO") or defaults.dotfiles_repo,
            dotfiles_dir=_path_override(env.get(f"{ENV_PREFIX}DOTFILES_DIR"), defaults.dotfiles_dir),
            ssh_dir=_path_override(env.get(f"{ENV_PREFIX}SSH_DIR"), defaults.ssh_dir),
            browser=env.get(f"{ENV_PREFIX}BROWSER") or defaults.browser,
            homebrew_install_url=env.get(f"{ENV_PREFIX}HOMEBREW_URL") or defaults.homebrew_install_url,
        )


def _path_override(value: Optional[str], default: Path) -> Path:
    if not value:
        return default
    return Path(value).expanduser()

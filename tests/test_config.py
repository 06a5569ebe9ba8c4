from pathlib import Path

from mac_bootstrap.config import DEFAULT_DOTFILES_REPO, BootstrapConfig


def test_defaults_follow_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    config = BootstrapConfig.from_env({})
    assert config.dotfiles_repo == DEFAULT_DOTFILES_REPO
    assert config.dotfiles_dir == tmp_path / ".dotfiles"
    assert config.ssh_dir == tmp_path / ".ssh"
    assert config.browser == "Safari"
    assert config.github_keys_url == "https://github.com/settings/keys"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    config = BootstrapConfig.from_env(
        {
            "MAC_BOOTSTRAP_DOTFILES_REPO": "git@example.com:me/dots.git",
            "MAC_BOOTSTRAP_DOTFILES_DIR": "~/code/dots",
            "MAC_BOOTSTRAP_SSH_DIR": "/tmp/keys",
            "MAC_BOOTSTRAP_BROWSER": "Firefox",
            "MAC_BOOTSTRAP_HOMEBREW_URL": "https://mirror.example.com/install.sh",
        }
    )
    assert config.dotfiles_repo == "git@example.com:me/dots.git"
    assert config.dotfiles_dir == tmp_path / "code" / "dots"
    assert config.ssh_dir == Path("/tmp/keys")
    assert config.browser == "Firefox"
    assert config.homebrew_install_url == "https://mirror.example.com/install.sh"


def test_empty_override_keeps_default(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    config = BootstrapConfig.from_env({"MAC_BOOTSTRAP_BROWSER": "", "MAC_BOOTSTRAP_SSH_DIR": ""})
    assert config.browser == "Safari"
    assert config.ssh_dir == tmp_path / ".ssh"

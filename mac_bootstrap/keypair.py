"""Generate a GitHub SSH keypair, register it with the agent and set the git identity."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console

from .config import KEY_TYPE, BootstrapConfig
from .errors import ProvisionError
from .formatting import error, heading, info, success, warn
from .runner import CommandRunner
from .system_state import HostIdentity, agent_reachable, gather_identity, parse_agent_output

logger = logging.getLogger(__name__)

Ask = Callable[[str], str]

SSH_CLIENT_FAILURE = 255

TEST_MENU = (
    "Choose a test option:",
    "1) Test if the new key is loaded into your SSH agent (ssh-add -l)",
    "2) Test your SSH connection to GitHub (ssh -T git@github.com)",
    "3) Finish Testing and Proceed",
)


@dataclass
class KeyIdentity:
    email: str
    name: str
    key_name: str
    key_path: Path

    @property
    def public_key_path(self) -> Path:
        return self.key_path.with_name(f"{self.key_path.name}.pub")


@dataclass
class ProvisionContext:
    config: BootstrapConfig
    runner: CommandRunner
    console: Console
    ask: Ask


def run_key_provisioner(ctx: ProvisionContext, host: Optional[HostIdentity] = None) -> int:
    """Walk through key generation and git setup; return the process exit code.

    Raises ProvisionError when a required answer is empty or ssh-keygen fails.
    """
    host = host or gather_identity()
    key_path = ctx.config.ssh_dir / host.key_name

    _print_banner(ctx, host.key_name)

    email = _require(
        ctx,
        "Please enter the email address associated with your GitHub account (e.g., your_email@example.com): ",
        "GitHub email cannot be empty. Exiting.",
    )
    name = _require(
        ctx,
        "Please enter the name you want to use for Git commits (e.g., John Doe): ",
        "Git user name cannot be empty. Exiting.",
    )
    identity = KeyIdentity(email=email, name=name, key_name=host.key_name, key_path=key_path)

    if key_path.is_file():
        answer = _prompt(ctx, f"A key named '{identity.key_name}' already exists. Do you want to overwrite it? (y/N) ")
        if not _confirmed(answer):
            info(ctx.console, "Operation cancelled. Exiting.")
            return 0
        _remove_keypair(identity)

    generate_keypair(ctx, identity)
    register_with_agent(ctx, identity)
    configure_git_identity(ctx, identity)
    copy_public_key(ctx, identity)
    open_github_settings(ctx, identity)

    _prompt(ctx, "Press Enter after you have successfully uploaded your SSH key to GitHub...")
    run_test_loop(ctx)
    offer_dotfiles_clone(ctx)

    ctx.console.print()
    success(
        ctx.console,
        "Script finished. Your SSH key should now be set up for GitHub, "
        "your Git configuration updated, and dotfiles handled.",
    )
    return 0


def generate_keypair(ctx: ProvisionContext, identity: KeyIdentity) -> None:
    info(ctx.console, "Generating SSH key pair...")
    identity.key_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    result = ctx.runner.run(
        ["ssh-keygen", "-t", KEY_TYPE, "-C", identity.email, "-f", str(identity.key_path), "-N", ""]
    )
    if not result.ok:
        raise ProvisionError("Failed to generate SSH key pair. Exiting.")

    success(ctx.console, "SSH key pair generated successfully:")
    info(ctx.console, f"  Private key: {identity.key_path}")
    info(ctx.console, f"  Public key: {identity.public_key_path}")
    ctx.console.print()


def register_with_agent(ctx: ProvisionContext, identity: KeyIdentity) -> None:
    info(ctx.console, "Adding SSH key to macOS ssh-agent and keychain...")
    ensure_agent(ctx)

    result = ctx.runner.run(["ssh-add", "--apple-use-keychain", str(identity.key_path)])
    if result.ok:
        success(ctx.console, "Key successfully added to ssh-agent and integrated with macOS Keychain.")
    else:
        warn(
            ctx.console,
            "Could not add key to ssh-agent or integrate with Keychain. You might need to add it manually later.",
        )
    ctx.console.print()


def ensure_agent(ctx: ProvisionContext) -> bool:
    """Start an ssh-agent unless one is reachable, exporting its variables into this process."""
    if agent_reachable():
        logger.debug("using existing ssh-agent at %s", os.environ.get("SSH_AUTH_SOCK"))
        return True

    result = ctx.runner.run(["ssh-agent", "-s"], capture=True)
    variables = parse_agent_output(result.stdout) if result.ok else {}
    if "SSH_AUTH_SOCK" not in variables:
        warn(ctx.console, "Could not start ssh-agent.")
        return False

    os.environ.update(variables)
    logger.debug("started ssh-agent: %s", variables)
    pid = variables.get("SSH_AGENT_PID")
    if pid:
        info(ctx.console, f"Agent pid {pid}")
    return True


def configure_git_identity(ctx: ProvisionContext, identity: KeyIdentity) -> None:
    info(ctx.console, "Configuring global Git user details...")
    for key, value in (("user.name", identity.name), ("user.email", identity.email)):
        result = ctx.runner.run(["git", "config", "--global", key, value])
        if result.ok:
            success(ctx.console, f"Git {key} set to: {value}")
        else:
            warn(ctx.console, f"Could not set Git {key}. Please check your Git installation.")
    ctx.console.print()


def copy_public_key(ctx: ProvisionContext, identity: KeyIdentity) -> bool:
    info(ctx.console, "Copying public key to clipboard...")
    try:
        public_key = identity.public_key_path.read_bytes()
    except OSError as exc:
        logger.debug("cannot read %s: %s", identity.public_key_path, exc)
        copied = False
    else:
        copied = ctx.runner.run(["pbcopy"], input_bytes=public_key).ok

    if copied:
        success(ctx.console, f"Public key ({identity.public_key_path}) copied to your clipboard!")
    else:
        error(ctx.console, "Could not copy public key to clipboard. You will need to copy it manually.")
        info(ctx.console, f"You can view the public key content by running: cat {identity.public_key_path}")
    ctx.console.print()
    return copied


def open_github_settings(ctx: ProvisionContext, identity: KeyIdentity) -> None:
    info(ctx.console, f"Opening {ctx.config.browser} to GitHub's SSH and GPG keys settings page...")
    result = ctx.runner.run(["open", "-a", ctx.config.browser, ctx.config.github_keys_url])
    if not result.ok:
        warn(ctx.console, f"Could not open {ctx.config.browser}. Visit {ctx.config.github_keys_url} manually.")

    info(ctx.console, "Please paste the copied public key into the 'New SSH key' field on the GitHub page.")
    info(ctx.console, f"You can give it a title like '{identity.key_name}' to easily identify it.")
    ctx.console.print()


def run_test_loop(ctx: ProvisionContext) -> None:
    """Offer connectivity checks until the user picks "finish"."""
    ctx.console.print()
    heading(ctx.console, "Testing Your SSH Setup")
    info(ctx.console, "You can now test if your SSH key setup is working correctly.")

    while True:
        ctx.console.print()
        for line in TEST_MENU:
            info(ctx.console, line)
        choice = _prompt(ctx, "Enter your choice (1, 2, or 3): ")
        if choice is None:
            logger.debug("input closed, leaving the test loop")
            return

        choice = choice.strip()
        if choice == "1":
            _test_agent_keys(ctx)
        elif choice == "2":
            _test_github_connection(ctx)
        elif choice == "3":
            info(ctx.console, "Proceeding to next step...")
            return
        else:
            info(ctx.console, "Invalid choice. Please enter 1, 2, or 3.")


def offer_dotfiles_clone(ctx: ProvisionContext) -> Optional[Path]:
    repo = ctx.config.dotfiles_repo
    ctx.console.print()
    heading(ctx.console, "Optional: Clone Dotfiles Repository")
    answer = _prompt(ctx, f"Would you like to clone the dotfiles repository ({repo})? (y/N) ")
    if not _confirmed(answer):
        info(ctx.console, "Skipping dotfiles repository clone.")
        return None

    default_dir = ctx.config.dotfiles_dir
    raw_dir = (_prompt(ctx, f"Enter the directory to clone the dotfiles into (default: {default_dir}): ") or "").strip()
    target = Path(raw_dir).expanduser() if raw_dir else default_dir

    info(ctx.console, f"Attempting to clone {repo} into {target}...")
    result = ctx.runner.run(["git", "clone", repo, str(target)])
    if not result.ok:
        error(ctx.console, "Failed to clone dotfiles repository. Please check the path and your SSH access.")
        return None

    success(ctx.console, f"Dotfiles repository cloned successfully into: {target}")
    return target


def _test_agent_keys(ctx: ProvisionContext) -> None:
    ctx.console.print()
    info(ctx.console, "--- Running: ssh-add -l ---")
    result = ctx.runner.run(["ssh-add", "-l"])
    ctx.console.print()
    if result.ok:
        info(ctx.console, "If you see your key's fingerprint and path above, it means it's loaded into the SSH agent.")
    else:
        warn(ctx.console, "Failed to list keys. Ensure ssh-agent is running.")


def _test_github_connection(ctx: ProvisionContext) -> None:
    host = ctx.config.github_ssh_host
    ctx.console.print()
    info(ctx.console, f"--- Running: ssh -T {host} ---")
    info(
        ctx.console,
        "Attempting to connect to GitHub. If this is your first time, "
        "you may be asked to confirm the host's authenticity.",
    )
    # GitHub closes the session with status 1 after a successful handshake
    result = ctx.runner.run(["ssh", "-T", host])
    ctx.console.print()
    if result.returncode != SSH_CLIENT_FAILURE:
        info(
            ctx.console,
            "If the message above contains \"Hi YOUR_GITHUB_USERNAME! You've successfully authenticated\", "
            "your SSH connection to GitHub is working!",
        )
    else:
        warn(ctx.console, "SSH connection to GitHub failed. Please review the error message above.")
        info(ctx.console, "Common issues: Key not uploaded to GitHub, incorrect key, or firewall issues.")


def _print_banner(ctx: ProvisionContext, key_name: str) -> None:
    heading(ctx.console, "GitHub SSH Key Generation and Git Configuration")
    info(ctx.console, f"This script will generate an ED25519 SSH key pair named '{key_name}' for GitHub.")
    info(ctx.console, "It will also configure your global Git user.name and user.email.")
    info(
        ctx.console,
        f"The public key will be copied to your clipboard, and {ctx.config.browser} "
        "will open to GitHub's SSH settings page.",
    )
    ctx.console.print()


def _require(ctx: ProvisionContext, question: str, message: str) -> str:
    answer = (_prompt(ctx, question) or "").strip()
    if not answer:
        raise ProvisionError(message)
    ctx.console.print()
    return answer


def _prompt(ctx: ProvisionContext, question: str) -> Optional[str]:
    try:
        return ctx.ask(question)
    except EOFError:
        return None


def _confirmed(answer: Optional[str]) -> bool:
    return (answer or "").strip() in ("y", "Y")


def _remove_keypair(identity: KeyIdentity) -> None:
    for path in (identity.key_path, identity.public_key_path):
        if path.is_file():
            logger.debug("removing %s", path)
            path.unlink()

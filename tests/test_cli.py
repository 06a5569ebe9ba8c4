import builtins

import pytest

from mac_bootstrap import cli
from mac_bootstrap.errors import ProvisionError


def test_keypair_main_exits_1_on_empty_email(monkeypatch, capsys):
    monkeypatch.setattr(builtins, "input", lambda prompt="": "")
    assert cli.keypair_main([]) == 1
    assert "GitHub email cannot be empty" in capsys.readouterr().out


def test_guarded_maps_errors_to_exit_codes(capsys):
    console = cli.Console()

    def fail():
        raise ProvisionError("boom", exit_code=3)

    def interrupt():
        raise KeyboardInterrupt

    assert cli._guarded(console, fail) == 3
    assert cli._guarded(console, interrupt) == cli.INTERRUPTED
    assert cli._guarded(console, lambda: 0) == 0


def test_preferences_main_skip_brew(monkeypatch):
    seen = {}

    def fake_setter(config, runner, console, *, install_brew=True):
        seen["install_brew"] = install_brew
        return 0

    monkeypatch.setattr(cli, "run_preference_setter", fake_setter)
    assert cli.preferences_main(["--skip-brew"]) == 0
    assert seen == {"install_brew": False}


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.keypair_main(["--version"])
    assert excinfo.value.code == 0
    assert "0.1.0" in capsys.readouterr().out


def test_keypair_prompts_are_printed_literally(monkeypatch, capsys):
    captured = {}

    def fake_provisioner(ctx):
        captured["answer"] = ctx.ask("clone [git@example.com:me/dots.git] into [bold]~/dots[/bold]? ")
        return 0

    monkeypatch.setattr(cli, "run_key_provisioner", fake_provisioner)
    monkeypatch.setattr(builtins, "input", lambda prompt="": "n")

    assert cli.keypair_main([]) == 0
    assert captured["answer"] == "n"
    assert "[git@example.com:me/dots.git] into [bold]~/dots[/bold]?" in capsys.readouterr().out

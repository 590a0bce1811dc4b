import pytest

from quizgen import cli


@pytest.fixture(autouse=True)
def reset_metadata(monkeypatch):
    """Ensure metadata.version is controllable during tests."""

    def fake_version(name: str) -> str:
        assert name == "quizgen"
        return "0.0-test"

    monkeypatch.setattr(cli.metadata, "version", fake_version)
    yield


def test_version_command_reports_distribution_version(capsys):
    code = cli.main(["--version"])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip() == "0.0-test"


def test_version_command_handles_missing_package(monkeypatch, capsys):
    monkeypatch.setattr(
        cli.metadata,
        "version",
        lambda name: (_ for _ in ()).throw(cli.metadata.PackageNotFoundError()),
    )
    code = cli.main(["version"])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip() == "unknown"


def test_no_args_prints_usage_and_returns_error(capsys):
    code = cli.main([])
    captured = capsys.readouterr()
    assert code == 2
    assert "Usage: quizgen" in captured.out
    assert "Available commands:" in captured.out


def test_help_flag_shows_usage(capsys):
    code = cli.main(["-h"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Usage: quizgen" in captured.out


def test_list_outputs_command_table(capsys):
    code = cli.main(["list"])
    captured = capsys.readouterr()
    assert code == 0
    assert "init" in captured.out
    assert "play" in captured.out
    assert "(TUI)" in captured.out


def test_help_for_command(capsys):
    code = cli.main(["help", "play"])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.startswith("play: ")
    assert "quizgen play --help" in captured.out


def test_help_for_unknown_command(capsys):
    code = cli.main(["help", "nope"])
    captured = capsys.readouterr()
    assert code == 2
    assert "Unknown command 'nope'." in captured.err


def test_unknown_command_returns_error(capsys):
    code = cli.main(["bogus"])
    captured = capsys.readouterr()
    assert code == 2
    assert "Unknown command 'bogus'." in captured.err
    assert "Available commands:" in captured.err


def test_dispatch_passes_arguments_and_restores_argv(tmp_path, monkeypatch):
    monkeypatch.setattr(cli.sys, "argv", ["quizgen", "init"])
    home = tmp_path / "ws"

    code = cli.main(["init", "--path", str(home), "--quiet"])

    assert code == 0
    assert (home / "config" / "quizgen.toml").exists()
    assert cli.sys.argv == ["quizgen", "init"]


def test_dispatch_converts_system_exit(capsys):
    code = cli.main(["play", "--help"])
    captured = capsys.readouterr()
    assert code == 0
    assert "usage: quizgen play" in captured.out


def test_dispatch_reports_argparse_errors(capsys):
    code = cli.main(["play", "--count", "many"])
    captured = capsys.readouterr()
    assert code == 2
    assert "invalid int value" in captured.err


def test_exit_code_handles_string_payload(capsys):
    assert cli._exit_code(SystemExit("fatal")) == 1
    assert "fatal" in capsys.readouterr().err
    assert cli._exit_code(SystemExit(None)) == 0
    assert cli._exit_code(SystemExit(3)) == 3

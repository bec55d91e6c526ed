"""Tests for the command-line entry point."""

import pytest

from nowplaying import cli
from nowplaying.memory.errors import AccessDeniedError, ModuleNotFoundInProcessError, ProcessNotFoundError


@pytest.fixture
def missing_config(tmp_path):
    return str(tmp_path / "missing.toml")


def test_parser_defaults():
    args = cli.get_arg_parser().parse_args([])
    assert args.command is None
    assert args.config == "config.toml"
    assert args.interval is None


def test_load_config_applies_overrides(missing_config):
    args = cli.get_arg_parser().parse_args([
        "-c", missing_config, "--no-json", "--txt-file", "song.txt",
        "-i", "1000", "--process", "Player.exe", "-d",
    ])
    settings = cli.load_config(args).settings

    assert settings.output_json is False
    assert settings.output_txt is True
    assert settings.txt_filename == "song.txt"
    assert settings.update_interval_ms == 1000
    assert settings.process_name == "Player.exe"
    assert settings.debug_mode is True


@pytest.mark.parametrize("interval", ["0", "-5"])
def test_invalid_interval_is_fatal(monkeypatch, missing_config, interval):
    def unreachable(name):
        raise AssertionError("process lookup should not run")

    monkeypatch.setattr(cli, "find_process", unreachable)
    assert cli.main(["-q", "-c", missing_config, "-i", interval, "once"]) == 1


def test_invalid_retries_is_fatal(missing_config):
    assert cli.main(["-q", "-c", missing_config, "-r", "-1", "watch"]) == 1


def test_process_not_found_is_fatal(monkeypatch, missing_config):
    def fail(name):
        raise ProcessNotFoundError(name)

    monkeypatch.setattr(cli, "find_process", fail)
    assert cli.main(["-q", "-c", missing_config, "once"]) == 1
    assert cli.main(["-q", "-c", missing_config, "watch"]) == 1


class FakeAttacher:
    detached = False

    def __init__(self, attach_error=None, module_error=None):
        self.attach_error = attach_error
        self.module_error = module_error

    def attach(self, pid):
        if self.attach_error:
            raise self.attach_error

    def get_base_address(self, name):
        if self.module_error:
            raise self.module_error
        return 0x400000

    def read(self, address, size):
        return None

    def detach(self):
        FakeAttacher.detached = True

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.detach()


@pytest.mark.parametrize(
    "attacher",
    [
        FakeAttacher(attach_error=AccessDeniedError(1234)),
        FakeAttacher(module_error=ModuleNotFoundInProcessError("QQMusic.dll", 1234)),
    ],
)
def test_open_failures_are_fatal(monkeypatch, missing_config, attacher):
    monkeypatch.setattr(cli, "find_process", lambda name: 1234)
    monkeypatch.setattr(cli, "ProcessAttacher", lambda: attacher)
    FakeAttacher.detached = False

    assert cli.main(["-q", "-c", missing_config, "once"]) == 1
    assert FakeAttacher.detached


def test_once_writes_error_placeholder(monkeypatch, tmp_path, missing_config):
    monkeypatch.setattr(cli, "find_process", lambda name: 1234)
    monkeypatch.setattr(cli, "ProcessAttacher", FakeAttacher)
    txt = tmp_path / "out.txt"
    js = tmp_path / "out.json"

    code = cli.main(["-q", "-c", missing_config, "--txt-file", str(txt), "--json-file", str(js), "once"])

    assert code == 0
    assert txt.read_bytes() == "ERROR".encode("utf-16-le")
    assert js.read_bytes().decode("utf-16-le") == '{"title": "ERROR"}'

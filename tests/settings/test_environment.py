import os
from pathlib import Path

from settings.environment import HostEnvironment


def test_from_os_snapshots_path_and_home(monkeypatch):
    monkeypatch.setenv("PATH", "/usr/bin:/bin")
    monkeypatch.setenv("HOME", "/root")

    env = HostEnvironment.from_os()

    assert env.home == Path("/root")
    assert env.path_entries == ["/usr/bin", "/bin"]
    assert env.base_env["PATH"] == "/usr/bin:/bin"


def test_add_path_is_idempotent():
    env = HostEnvironment(home=Path("/root"), path_entries=["/usr/bin"])

    assert env.add_path("/usr/local/go/bin") is True
    assert env.add_path("/usr/local/go/bin") is False
    assert env.path == "/usr/bin:/usr/local/go/bin"


def test_as_env_does_not_touch_process_environment(monkeypatch):
    monkeypatch.setenv("PATH", "/usr/bin")
    env = HostEnvironment.from_os()
    env.add_path("/usr/local/go/bin")

    mapping = env.as_env()

    assert mapping["PATH"] == "/usr/bin:/usr/local/go/bin"
    assert mapping["DEBIAN_FRONTEND"] == "noninteractive"
    assert os.environ["PATH"] == "/usr/bin"


def test_which_searches_own_path(tmp_path):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    tool = bin_dir / "go"
    tool.write_text("#!/bin/sh\n")
    tool.chmod(0o755)
    env = HostEnvironment(home=tmp_path, path_entries=[])

    assert env.which("go") is None
    env.add_path(str(bin_dir))
    assert env.which("go") == str(tool)

# tests/conftest.py
import logging
import subprocess
from unittest.mock import MagicMock, create_autospec

import pytest

from common.debian.apt_manager import AptManager
from settings.config_models import AppSettings
from settings.environment import HostEnvironment


@pytest.fixture
def app_settings(tmp_path):
    """Real settings with every host path redirected into tmp_path."""
    settings = AppSettings(log_file=str(tmp_path / "install_packages.log"))
    settings.keyrings_dir = tmp_path / "keyrings"
    settings.go.install_root = tmp_path / "usr-local"
    settings.yarn.keyring_path = tmp_path / "keyrings" / "yarn.gpg"
    settings.yarn.source_list_path = tmp_path / "sources" / "yarn.list"
    settings.docker.keyring_path = tmp_path / "keyrings" / "docker.gpg"
    settings.docker.source_list_path = tmp_path / "sources" / "docker.list"
    settings.node.stale_files = [
        tmp_path / "keyrings" / "nodesource.gpg",
        tmp_path / "sources" / "nodesource.list",
    ]
    return settings


@pytest.fixture
def host_env(tmp_path):
    home = tmp_path / "home"
    home.mkdir()
    return HostEnvironment(
        home=home,
        path_entries=["/usr/sbin", "/usr/bin"],
        base_env={"LANG": "C.UTF-8"},
    )


@pytest.fixture
def mock_apt():
    """AptManager double whose operations all succeed by default."""
    apt = create_autospec(AptManager, instance=True)
    for method in (
        "update",
        "upgrade",
        "install",
        "only_upgrade",
        "remove",
        "autoremove",
        "ensure_keyring_dir",
        "add_gpg_key_from_url",
        "add_source_list",
    ):
        getattr(apt, method).return_value = True
    apt.is_installed.return_value = False
    return apt


@pytest.fixture
def mock_logger():
    return MagicMock(spec=logging.Logger)


class FakeCommands:
    """
    Stands in for the command runner used by units.

    ``responses`` maps a command tuple to its stdout, or to an exception
    instance that the call raises. Unknown commands succeed with empty output.
    """

    def __init__(self):
        self.responses = {}
        self.mock = None

    def __call__(self, command, app_settings, **kwargs):
        response = self.responses.get(tuple(command), "")
        if isinstance(response, BaseException):
            raise response
        return subprocess.CompletedProcess(command, 0, stdout=response, stderr="")

    def commands(self):
        return [c.args[0] for c in self.mock.call_args_list]


@pytest.fixture
def fake_commands(mocker):
    fake = FakeCommands()
    fake.mock = mocker.patch("units.base_unit.run_command", side_effect=fake)
    return fake


@pytest.fixture
def tools_on_path(mocker, host_env):
    """Set of command names ``host_env.which`` resolves."""
    present = set()
    mocker.patch.object(
        host_env,
        "which",
        side_effect=lambda cmd: f"/usr/bin/{cmd}" if cmd in present else None,
    )
    return present

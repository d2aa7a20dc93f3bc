import subprocess

import pytest

from units.base_unit import Action
from units.orchestrator import ProvisionOrchestrator

ALL_TOOLS = {"go", "node", "npm", "yarn", "docker"}


@pytest.fixture
def orchestrator(app_settings, host_env, mock_apt, mock_logger, fake_commands, tools_on_path):
    return ProvisionOrchestrator(
        app_settings, host_env=host_env, logger=mock_logger, apt_manager=mock_apt
    )


@pytest.fixture
def provisioned_host(mock_apt, fake_commands, tools_on_path):
    """A host where an earlier run already installed everything."""
    tools_on_path.update(ALL_TOOLS)
    mock_apt.is_installed.return_value = True
    fake_commands.responses[("go", "version")] = "go version go1.22.3 linux/amd64"


def test_plan_runs_every_unit_in_order(orchestrator):
    assert orchestrator.plan() == [
        "system_update",
        "base_packages",
        "python",
        "go",
        "nodejs",
        "npm",
        "yarn",
        "docker",
        "docker_smoke_test",
    ]


def test_plan_honours_configured_units(orchestrator, app_settings):
    app_settings.units = ["npm"]

    assert orchestrator.plan()[-1] == "npm"
    assert "docker" not in orchestrator.plan()


def test_second_run_installs_nothing(orchestrator, provisioned_host, mock_apt, mock_logger):
    assert orchestrator.run() is True

    assert orchestrator.results == {
        "system_update": Action.UPGRADE,
        "base_packages": Action.UPGRADE,
        "python": Action.UPGRADE,
        "go": Action.SKIP,
        "nodejs": Action.UPGRADE,
        "npm": Action.UPGRADE,
        "yarn": Action.UPGRADE,
        "docker": Action.UPGRADE,
        "docker_smoke_test": Action.SKIP,
    }
    assert Action.INSTALL not in orchestrator.results.values()
    mock_apt.install.assert_not_called()
    mock_apt.add_source_list.assert_not_called()
    mock_logger.info.assert_called_with(
        "✅ Installation and updates completed successfully!", exc_info=False
    )


def test_upgrade_failures_do_not_stop_the_run(orchestrator, provisioned_host, mock_apt, fake_commands):
    mock_apt.only_upgrade.return_value = False
    fake_commands.responses[("npm", "install", "-g", "yarn")] = (
        subprocess.CalledProcessError(1, "npm")
    )

    assert orchestrator.run() is True
    assert "docker_smoke_test" in orchestrator.results


def test_fatal_failure_stops_later_units(orchestrator, mock_apt, mock_logger, fake_commands):
    mock_apt.install.return_value = False

    assert orchestrator.run() is False

    assert orchestrator.results == {"system_update": Action.UPGRADE}
    mock_apt.install.assert_called_once_with(["curl"], orchestrator.app_settings)
    mock_logger.error.assert_called_once_with("❌ Failed to install curl.", exc_info=False)
    assert fake_commands.mock.call_count == 0


def test_failed_smoke_test_fails_the_run(orchestrator, provisioned_host, fake_commands, mock_logger):
    fake_commands.responses[("docker", "run", "hello-world")] = (
        subprocess.CalledProcessError(125, "docker")
    )

    assert orchestrator.run() is False

    assert "docker" in orchestrator.results
    assert "docker_smoke_test" not in orchestrator.results
    mock_logger.error.assert_called_once_with("❌ Docker test failed.", exc_info=False)


def test_missing_apt_get_fails_the_run(app_settings, host_env, mock_logger, mocker):
    mocker.patch(
        "units.orchestrator.AptManager",
        side_effect=FileNotFoundError("apt-get not found in PATH."),
    )
    orchestrator = ProvisionOrchestrator(app_settings, host_env=host_env, logger=mock_logger)

    assert orchestrator.run() is False

    mock_logger.error.assert_called_once_with("❌ apt-get not found in PATH.", exc_info=False)
    assert orchestrator.results == {}

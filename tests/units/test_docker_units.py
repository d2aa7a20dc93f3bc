import subprocess
from unittest.mock import call

import pytest

from units.base_unit import Action, ProvisioningError
from units.components.docker import DockerUnit
from units.components.docker_smoke_test import DockerSmokeTestUnit


@pytest.fixture
def host_facts(mocker):
    arch = mocker.patch("units.components.docker.get_dpkg_architecture", return_value="amd64")
    codename = mocker.patch(
        "units.components.docker.get_distribution_codename", return_value="noble"
    )
    return arch, codename


@pytest.fixture
def docker_unit(app_settings, host_env, mock_apt, mock_logger, fake_commands, tools_on_path):
    return DockerUnit(app_settings, host_env, apt_manager=mock_apt, logger=mock_logger)


def test_fresh_install(docker_unit, mock_apt, app_settings, host_facts, mock_logger):
    docker_settings = app_settings.docker

    assert docker_unit.run() is Action.INSTALL

    assert mock_apt.remove.call_args_list == [
        call([pkg], app_settings) for pkg in docker_settings.conflicting_packages
    ]
    mock_apt.add_gpg_key_from_url.assert_called_once_with(
        "https://download.docker.com/linux/ubuntu/gpg", docker_settings.keyring_path, app_settings
    )
    mock_apt.add_source_list.assert_called_once_with(
        docker_settings.source_list_path,
        f"deb [arch=amd64 signed-by={docker_settings.keyring_path}] "
        "https://download.docker.com/linux/ubuntu noble stable",
    )
    mock_apt.install.assert_called_with(docker_settings.packages, app_settings)
    mock_logger.info.assert_any_call("✅ Docker Engine installed successfully.", exc_info=False)


def test_conflicting_package_removal_failures_are_ignored(docker_unit, mock_apt, host_facts):
    mock_apt.remove.return_value = False

    assert docker_unit.run() is Action.INSTALL


def test_missing_host_facts_are_fatal(docker_unit, mock_apt, host_facts):
    host_facts[1].return_value = None

    with pytest.raises(ProvisioningError, match="Could not determine architecture or codename"):
        docker_unit.run()
    mock_apt.add_source_list.assert_not_called()


def test_key_failure_is_fatal(docker_unit, mock_apt, host_facts):
    mock_apt.add_gpg_key_from_url.return_value = False

    with pytest.raises(ProvisioningError, match="Failed to set up Docker GPG key."):
        docker_unit.run()
    host_facts[0].assert_not_called()


def test_install_failure_is_fatal(docker_unit, mock_apt, app_settings, host_facts):
    mock_apt.install.side_effect = lambda pkgs, _settings: pkgs != app_settings.docker.packages

    with pytest.raises(ProvisioningError, match="Failed to install Docker."):
        docker_unit.run()


def test_present_docker_is_upgraded(docker_unit, mock_apt, app_settings, tools_on_path, host_facts):
    tools_on_path.add("docker")

    assert docker_unit.run() is Action.UPGRADE

    mock_apt.only_upgrade.assert_called_once_with(app_settings.docker.packages, app_settings)
    mock_apt.add_source_list.assert_not_called()
    host_facts[0].assert_not_called()


def test_upgrade_failure_is_a_warning(docker_unit, mock_apt, tools_on_path, mock_logger):
    tools_on_path.add("docker")
    mock_apt.only_upgrade.return_value = False

    assert docker_unit.run() is Action.UPGRADE

    mock_logger.warning.assert_called_once_with("⚠️ Failed to update Docker.", exc_info=False)


@pytest.fixture
def smoke_test(app_settings, host_env, mock_apt, mock_logger, fake_commands, tools_on_path):
    return DockerSmokeTestUnit(app_settings, host_env, apt_manager=mock_apt, logger=mock_logger)


def test_smoke_test_runs_hello_world(smoke_test, fake_commands):
    assert smoke_test.run() is Action.SKIP

    assert fake_commands.commands() == [["docker", "run", "hello-world"]]
    assert fake_commands.mock.call_args.kwargs["check"] is True


def test_smoke_test_failure_is_fatal(smoke_test, fake_commands):
    fake_commands.responses[("docker", "run", "hello-world")] = (
        subprocess.CalledProcessError(125, "docker")
    )

    with pytest.raises(ProvisioningError, match="Docker test failed."):
        smoke_test.run()

# units/components/docker.py
# -*- coding: utf-8 -*-
"""
Docker unit.

This module provides a self-contained unit for Docker Engine and the
Compose plugin from Docker's own apt repository.
"""

from common.system_utils import get_distribution_codename, get_dpkg_architecture
from units.base_unit import Action, BaseUnit, UnitState
from units.registry import UnitRegistry


@UnitRegistry.register(
    name="docker",
    metadata={
        "dependencies": ["yarn"],
        "description": "Docker Engine container runtime and Compose plugin",
    },
)
class DockerUnit(BaseUnit):
    """
    Unit for Docker Engine.

    An existing Docker is upgraded in place with only-upgrade, and a failure
    there is a warning. A fresh install removes the distribution's conflicting
    packages, adds Docker's signing key and repository, and installs the
    engine; every failure on that path is fatal.
    """

    def probe(self) -> UnitState:
        if self.host_env.which("docker") is None:
            return UnitState(installed=False)
        return UnitState(installed=True, version=self.command_output(["docker", "--version"]))

    def apply(self, action: Action, state: UnitState) -> None:
        self.info("Checking Docker installation...", "step")
        if action is Action.UPGRADE:
            self._upgrade()
        else:
            self._install()

    def _upgrade(self) -> None:
        docker_settings = self.app_settings.docker
        self.info("Docker is already installed, checking for updates...")
        if not self.apt.update(self.app_settings):
            self.warn("Failed to refresh package lists before updating Docker.")
        if not self.apt.only_upgrade(docker_settings.packages, self.app_settings):
            self.warn("Failed to update Docker.")

    def _install(self) -> None:
        docker_settings = self.app_settings.docker
        self.info("Installing Docker and Docker Compose...", "package")

        if not (
            self.apt.update(self.app_settings)
            and self.apt.upgrade(self.app_settings)
        ):
            self.warn("System update before installing Docker did not complete.")

        for package in docker_settings.conflicting_packages:
            self.apt.remove([package], self.app_settings)

        if not self.apt.install(self.app_settings.repo_prereq_packages, self.app_settings):
            self.warn("Failed to install repository prerequisites.")

        self._setup_docker_gpg_key()
        self._configure_docker_apt_repository()

        if not self.apt.update(self.app_settings):
            self.warn("Failed to refresh package lists after adding the Docker repository.")
        if not self.apt.install(docker_settings.packages, self.app_settings):
            self.fail("Failed to install Docker.")
        self.info("Docker Engine installed successfully.", "success")

    def _setup_docker_gpg_key(self) -> None:
        docker_settings = self.app_settings.docker
        if not (
            self.apt.ensure_keyring_dir(self.app_settings.keyrings_dir, self.app_settings)
            and self.apt.add_gpg_key_from_url(
                docker_settings.key_url,
                docker_settings.keyring_path,
                self.app_settings,
            )
        ):
            self.fail("Failed to set up Docker GPG key.")

    def _configure_docker_apt_repository(self) -> None:
        docker_settings = self.app_settings.docker
        env = self.host_env.as_env()
        arch = get_dpkg_architecture(self.app_settings, self.logger, env=env)
        codename = get_distribution_codename(self.app_settings, self.logger, env=env)
        if not arch or not codename:
            self.fail("Could not determine architecture or codename for the Docker repository.")

        if not self.apt.add_source_list(
            docker_settings.source_list_path,
            docker_settings.source_line(arch, codename),
        ):
            self.fail("Failed to configure Docker apt repository.")

# units/components/docker_smoke_test.py
# -*- coding: utf-8 -*-
"""
Runs a throwaway container to prove the Docker daemon works end to end.
"""

import subprocess

from units.base_unit import Action, BaseUnit, UnitState
from units.registry import UnitRegistry


@UnitRegistry.register(
    name="docker_smoke_test",
    metadata={
        "dependencies": ["docker"],
        "description": "docker run hello-world",
    },
)
class DockerSmokeTestUnit(BaseUnit):
    def probe(self) -> UnitState:
        return UnitState(installed=self.host_env.which("docker") is not None)

    def decide(self, state: UnitState) -> Action:
        return Action.SKIP

    def apply(self, action: Action, state: UnitState) -> None:
        image = self.app_settings.docker.smoke_test_image
        self.info("Testing Docker installation...", "step")
        try:
            self.run_command(["docker", "run", image], capture_output=True, check=True)
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.fail("Docker test failed.", e)
        self.info(f"Docker ran {image} successfully.", "success")

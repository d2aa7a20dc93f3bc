# units/components/go.py
# -*- coding: utf-8 -*-
"""
Go toolchain pinned to a single version from the official tarball.

Any installed version other than the desired one is replaced by removing
GOROOT and extracting the release tarball again. Both the fresh install and
the replacement are fatal on failure.
"""

import re
import shutil
import subprocess
import tarfile
from pathlib import Path
from typing import Optional

import requests

from units.base_unit import Action, BaseUnit, UnitState
from units.registry import UnitRegistry

GO_VERSION_PATTERN = re.compile(r"\bgo version go(\S+)")


def parse_go_version(output: Optional[str]) -> Optional[str]:
    """
    Extract the version from ``go version`` output.

    >>> parse_go_version("go version go1.22.3 linux/amd64")
    '1.22.3'
    """
    if not output:
        return None
    match = GO_VERSION_PATTERN.search(output)
    return match.group(1) if match else None


@UnitRegistry.register(
    name="go",
    metadata={
        "dependencies": ["python"],
        "description": "Go toolchain from go.dev release tarballs",
    },
)
class GoUnit(BaseUnit):
    def probe(self) -> UnitState:
        # Under sudo the secure_path never includes the Go directories.
        self._extend_path()
        if self.host_env.which("go") is None:
            return UnitState(installed=False)
        return UnitState(
            installed=True,
            version=parse_go_version(self.command_output(["go", "version"])),
        )

    def decide(self, state: UnitState) -> Action:
        if not state.installed:
            return Action.INSTALL
        if state.version == self.app_settings.go.version:
            return Action.SKIP
        return Action.UPGRADE

    def apply(self, action: Action, state: UnitState) -> None:
        go_settings = self.app_settings.go
        self.info("Checking Go installation...", "step")

        if action is Action.SKIP:
            self.info(f"Go {go_settings.version} is already installed.", "success")
            return

        if action is Action.UPGRADE:
            self.info(f"Updating Go to {go_settings.version}...", "package")
        else:
            self.info(f"Installing Go {go_settings.version}...", "package")

        self._install_release()
        self._update_shell_profile()
        self._extend_path()
        self._verify(action)

    def _extend_path(self) -> None:
        self.host_env.add_path(str(self.app_settings.go.bin_dir))
        self.host_env.add_path(str(self.host_env.home / "go" / "bin"))

    def _install_release(self) -> None:
        go_settings = self.app_settings.go
        shutil.rmtree(go_settings.goroot, ignore_errors=True)

        url = go_settings.download_url
        self.logger.debug(f"Downloading {url} into {go_settings.install_root}")
        try:
            with requests.get(
                url, stream=True, timeout=go_settings.download_timeout
            ) as response:
                response.raise_for_status()
                response.raw.decode_content = True
                with tarfile.open(fileobj=response.raw, mode="r|gz") as archive:
                    if hasattr(tarfile, "data_filter"):
                        archive.extractall(go_settings.install_root, filter="data")
                    else:
                        archive.extractall(go_settings.install_root)
        except (requests.exceptions.RequestException, tarfile.TarError, OSError) as e:
            self.logger.error(f"Go download from {url} failed: {e}")
            self.fail("Failed to download or extract Go.", e)

    def _update_shell_profile(self) -> None:
        go_settings = self.app_settings.go
        profile: Path = self.host_env.home / go_settings.profile_file
        export_line = go_settings.profile_export
        try:
            existing = profile.read_text(encoding="utf-8") if profile.exists() else ""
            if export_line in existing.splitlines():
                self.logger.debug(f"{profile} already exports the Go PATH.")
                return
            with open(profile, "a", encoding="utf-8") as f:
                if existing and not existing.endswith("\n"):
                    f.write("\n")
                f.write(export_line + "\n")
        except OSError as e:
            self.warn(f"Could not add the Go PATH export to {profile}: {e}")

    def _verify(self, action: Action) -> None:
        go_settings = self.app_settings.go
        failure = (
            "Go update failed." if action is Action.UPGRADE else "Go installation failed."
        )
        try:
            result = self.run_command(["go", "version"], capture_output=True, check=True)
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.fail(failure, e)

        installed_version = parse_go_version(result.stdout)
        if installed_version != go_settings.version:
            self.logger.error(
                f"Expected Go {go_settings.version}, found {installed_version}."
            )
            self.fail(failure)
        self.info(result.stdout.strip(), "success")

# settings/environment.py
# -*- coding: utf-8 -*-
"""
Explicit process environment handed to every provisioning unit.

Units never mutate ``os.environ``. A unit that changes the search path
(for example after installing Go) records the change here, and every later
command and PATH lookup is made against this object.
"""

import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

DEFAULT_EXTRA_ENV: Dict[str, str] = {"DEBIAN_FRONTEND": "noninteractive"}


@dataclass
class HostEnvironment:
    home: Path
    path_entries: List[str] = field(default_factory=list)
    extra: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_EXTRA_ENV))
    base_env: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_os(cls) -> "HostEnvironment":
        """Snapshot the current process environment."""
        path_value = os.environ.get("PATH", os.defpath)
        return cls(
            home=Path(os.environ.get("HOME", str(Path.home()))),
            path_entries=[p for p in path_value.split(os.pathsep) if p],
            base_env=dict(os.environ),
        )

    @property
    def path(self) -> str:
        return os.pathsep.join(self.path_entries)

    def add_path(self, entry: str) -> bool:
        """Append ``entry`` to PATH. Returns False if it was already present."""
        if entry in self.path_entries:
            return False
        self.path_entries.append(entry)
        return True

    def which(self, command_name: str) -> Optional[str]:
        return shutil.which(command_name, path=self.path)

    def as_env(self) -> Dict[str, str]:
        env = dict(self.base_env)
        env.update(self.extra)
        env["HOME"] = str(self.home)
        env["PATH"] = self.path
        return env

# settings/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for provisioner configuration.

This module defines the structured settings for every software unit,
including defaults, type annotations, and descriptions.
It utilizes Pydantic for data validation and settings management.
"""

from pathlib import Path
from typing import Dict, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
LOG_FILE_DEFAULT: str = "/var/log/install_packages.log"
KEYRINGS_DIR_DEFAULT: str = "/etc/apt/keyrings"
SOURCES_DIR_DEFAULT: str = "/etc/apt/sources.list.d"

BASE_PACKAGES_DEFAULT: List[str] = [
    "curl",
    "iptables",
    "build-essential",
    "git",
    "wget",
    "lz4",
    "jq",
    "make",
    "gcc",
    "nano",
    "automake",
    "autoconf",
    "tmux",
    "htop",
    "nvme-cli",
    "pkg-config",
    "libssl-dev",
    "libleveldb-dev",
    "tar",
    "clang",
    "bsdmainutils",
    "ncdu",
    "unzip",
]

# Prerequisites for fetching and dearmoring third-party repository keys.
REPO_PREREQ_PACKAGES_DEFAULT: List[str] = ["ca-certificates", "curl", "gnupg"]

GO_VERSION_DEFAULT: str = "1.22.3"
GO_DOWNLOAD_URL_TEMPLATE_DEFAULT: str = (
    "https://go.dev/dl/go{version}.linux-{arch}.tar.gz"
)

NODESOURCE_SETUP_URL_DEFAULT: str = "https://deb.nodesource.com/setup_lts.x"

YARN_KEY_URL_DEFAULT: str = "https://dl.yarnpkg.com/debian/pubkey.gpg"
YARN_REPO_URL_DEFAULT: str = "https://dl.yarnpkg.com/debian/"

DOCKER_KEY_URL_DEFAULT: str = "https://download.docker.com/linux/ubuntu/gpg"
DOCKER_REPO_URL_DEFAULT: str = "https://download.docker.com/linux/ubuntu"
DOCKER_PACKAGES_DEFAULT: List[str] = [
    "docker-ce",
    "docker-ce-cli",
    "containerd.io",
    "docker-buildx-plugin",
    "docker-compose-plugin",
]
DOCKER_CONFLICTING_PACKAGES_DEFAULT: List[str] = [
    "docker.io",
    "docker-doc",
    "docker-compose",
    "podman-docker",
    "containerd",
    "runc",
]

UNITS_DEFAULT: List[str] = [
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

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
}


class PythonSettings(BaseSettings):
    """System Python packages."""
    model_config = SettingsConfigDict(env_prefix="PYTHON_", extra="ignore")

    probe_package: str = Field(
        default="python3",
        description="Package whose presence decides between install and upgrade.",
    )
    upgrade_packages: List[str] = Field(
        default_factory=lambda: [
            "python3",
            "python3-pip",
            "python3-dev",
            "libssl-dev",
            "libffi-dev",
        ],
        description="Packages passed to 'apt-get install --only-upgrade'.",
    )
    install_packages: List[str] = Field(
        default_factory=lambda: [
            "python3-pip",
            "python3-dev",
            "libssl-dev",
            "libffi-dev",
        ],
        description="Packages installed when Python 3 is missing.",
    )


class GoSettings(BaseSettings):
    """Go toolchain settings."""
    model_config = SettingsConfigDict(env_prefix="GO_", extra="ignore")

    version: str = Field(default=GO_VERSION_DEFAULT, description="Desired Go version.")
    arch: str = Field(default="amd64", description="Architecture of the Go tarball.")
    download_url_template: str = Field(
        default=GO_DOWNLOAD_URL_TEMPLATE_DEFAULT,
        description="Tarball URL. Supports placeholders {version} and {arch}.",
    )
    install_root: Path = Field(
        default=Path("/usr/local"),
        description="Directory the tarball is extracted into.",
    )
    profile_file: str = Field(
        default=".bash_profile",
        description="Shell profile, relative to the home directory, that receives the PATH export.",
    )
    download_timeout: int = Field(default=300, description="Download timeout in seconds.")

    @property
    def download_url(self) -> str:
        return self.download_url_template.format(version=self.version, arch=self.arch)

    @property
    def goroot(self) -> Path:
        return self.install_root / "go"

    @property
    def bin_dir(self) -> Path:
        return self.goroot / "bin"

    @property
    def profile_export(self) -> str:
        """Line appended to the shell profile."""
        return f"export PATH=$PATH:{self.bin_dir}:$HOME/go/bin"


class NodeSettings(BaseSettings):
    """Node.js and npm settings."""
    model_config = SettingsConfigDict(env_prefix="NODE_", extra="ignore")

    setup_script_url: str = Field(
        default=NODESOURCE_SETUP_URL_DEFAULT,
        description="NodeSource repository setup script.",
    )
    stale_files: List[Path] = Field(
        default_factory=lambda: [
            Path(KEYRINGS_DIR_DEFAULT) / "nodesource.gpg",
            Path(SOURCES_DIR_DEFAULT) / "nodesource.list",
        ],
        description="Leftover NodeSource files removed before a fresh install.",
    )


class YarnSettings(BaseSettings):
    """Yarn repository settings."""
    model_config = SettingsConfigDict(env_prefix="YARN_", extra="ignore")

    key_url: str = Field(default=YARN_KEY_URL_DEFAULT, description="Yarn signing key URL.")
    keyring_path: Path = Field(
        default=Path(KEYRINGS_DIR_DEFAULT) / "yarn.gpg",
        description="Dearmored yarn keyring.",
    )
    repo_url: str = Field(default=YARN_REPO_URL_DEFAULT, description="Yarn apt repository.")
    source_list_path: Path = Field(
        default=Path(SOURCES_DIR_DEFAULT) / "yarn.list",
        description="Yarn apt source list.",
    )

    @property
    def source_line(self) -> str:
        return f"deb [signed-by={self.keyring_path}] {self.repo_url} stable main"


class DockerSettings(BaseSettings):
    """Docker Engine settings."""
    model_config = SettingsConfigDict(env_prefix="DOCKER_", extra="ignore")

    packages: List[str] = Field(
        default_factory=lambda: list(DOCKER_PACKAGES_DEFAULT),
        description="Docker Engine and Compose packages.",
    )
    conflicting_packages: List[str] = Field(
        default_factory=lambda: list(DOCKER_CONFLICTING_PACKAGES_DEFAULT),
        description="Distribution packages removed before installing Docker CE.",
    )
    key_url: str = Field(default=DOCKER_KEY_URL_DEFAULT, description="Docker signing key URL.")
    keyring_path: Path = Field(
        default=Path(KEYRINGS_DIR_DEFAULT) / "docker.gpg",
        description="Dearmored Docker keyring.",
    )
    repo_url: str = Field(default=DOCKER_REPO_URL_DEFAULT, description="Docker apt repository.")
    source_list_path: Path = Field(
        default=Path(SOURCES_DIR_DEFAULT) / "docker.list",
        description="Docker apt source list.",
    )
    smoke_test_image: str = Field(default="hello-world", description="Image run to verify Docker.")

    def source_line(self, arch: str, codename: str) -> str:
        return (
            f"deb [arch={arch} signed-by={self.keyring_path}] "
            f"{self.repo_url} {codename} stable"
        )


class AppSettings(BaseSettings):
    """Main provisioner settings."""
    model_config = SettingsConfigDict(extra="ignore")

    log_file: str = Field(default=LOG_FILE_DEFAULT, description="Append-only log file.")
    log_level: str = Field(default="INFO", description="Root log level.")
    log_json: bool = Field(default=False, description="Emit JSON-structured log lines.")

    keyrings_dir: Path = Field(
        default=Path(KEYRINGS_DIR_DEFAULT),
        description="Directory holding third-party apt keyrings.",
    )
    repo_prereq_packages: List[str] = Field(
        default_factory=lambda: list(REPO_PREREQ_PACKAGES_DEFAULT),
        description="Packages needed to add third-party apt repositories.",
    )
    base_packages: List[str] = Field(
        default_factory=lambda: list(BASE_PACKAGES_DEFAULT),
        description="Base packages installed or upgraded one by one.",
    )
    units: List[str] = Field(
        default_factory=lambda: list(UNITS_DEFAULT),
        description="Units to run. Their dependencies are always included.",
    )

    python: PythonSettings = Field(default_factory=PythonSettings)
    go: GoSettings = Field(default_factory=GoSettings)
    node: NodeSettings = Field(default_factory=NodeSettings)
    yarn: YarnSettings = Field(default_factory=YarnSettings)
    docker: DockerSettings = Field(default_factory=DockerSettings)

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))


#!/usr/bin/env python3
"""
agent-environment Install Root Layout
Everything the installer owns lives under one directory
"""

from dataclasses import dataclass
from pathlib import Path

from agentenv.platform.detector import PlatformId, executable_name

ENV_SH = 'env.sh'
ENV_PS1 = 'env.ps1'

# Entries the installer creates. Uninstall removes these and nothing else.
OWNED_DIRS = ('bin', 'python', 'venv', 'fnm')
OWNED_FILES = (ENV_SH, ENV_PS1)


@dataclass(frozen=True)
class InstallRoot:
    """Install root and the paths derived from it"""
    path: Path

    @classmethod
    def at(cls, path) -> 'InstallRoot':
        return cls(Path(path).expanduser().absolute())

    @property
    def bin_dir(self) -> Path:
        return self.path / 'bin'

    @property
    def python_dir(self) -> Path:
        """uv-managed interpreters (UV_PYTHON_INSTALL_DIR)"""
        return self.path / 'python'

    @property
    def venv_dir(self) -> Path:
        return self.path / 'venv'

    @property
    def fnm_dir(self) -> Path:
        """fnm state and Node installs (FNM_DIR)"""
        return self.path / 'fnm'

    @property
    def env_sh(self) -> Path:
        return self.path / ENV_SH

    @property
    def env_ps1(self) -> Path:
        return self.path / ENV_PS1

    @property
    def config_file(self) -> Path:
        return self.path / 'config.yml'

    def local_binary(self, binary_name: str, platform_id: PlatformId) -> Path:
        return self.bin_dir / executable_name(binary_name, platform_id)

    def venv_python(self, platform_id: PlatformId) -> Path:
        if platform_id.is_windows:
            return self.venv_dir / 'Scripts' / 'python.exe'
        return self.venv_dir / 'bin' / 'python'

    def __str__(self) -> str:
        return str(self.path)

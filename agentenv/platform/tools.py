#!/usr/bin/env python3
"""
agent-environment Tool Slots
Fixed descriptors for the four managed tools and their release artifacts
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from agentenv.errors import UnsupportedPlatformForTool
from agentenv.platform.detector import PlatformId
from agentenv.platform.version import SemVer

LATEST = 'latest'


class ArchiveFormat(Enum):
    TAR_GZ = "tar.gz"
    ZIP = "zip"

    @classmethod
    def from_name(cls, asset: str) -> 'ArchiveFormat':
        lowered = asset.lower()
        if lowered.endswith(('.tar.gz', '.tgz')):
            return cls.TAR_GZ
        if lowered.endswith('.zip'):
            return cls.ZIP
        raise ValueError(f"Unknown archive type: {asset}")


@dataclass(frozen=True)
class ToolSlot:
    """
    One managed tool

    artifacts maps a platform key ("linux-x86_64") to the release asset
    name. Slots without artifacts are never downloaded directly; they are
    installed through another slot's tool.
    """
    name: str
    binary_name: str
    minimum_version: Optional[SemVer] = None
    version_args: Tuple[str, ...] = ('--version',)
    artifacts: Dict[str, str] = field(default_factory=dict)
    url_latest: str = ''
    url_pinned: str = ''
    companions: Tuple[str, ...] = ()

    def __hash__(self) -> int:
        return hash(self.name)

    @property
    def downloadable(self) -> bool:
        return bool(self.artifacts)

    def asset_for(self, platform_id: PlatformId) -> str:
        """
        Release asset name for a platform

        Raises:
            UnsupportedPlatformForTool: no artifact published for this platform
        """
        asset = self.artifacts.get(platform_id.key)
        if asset is None:
            raise UnsupportedPlatformForTool(self.name, platform_id.key)
        return asset

    def download_url(self, platform_id: PlatformId, version: str = LATEST) -> Tuple[str, ArchiveFormat]:
        """
        Build the download URL for a platform and requested version

        Args:
            platform_id: Target platform
            version: 'latest' or an explicit release tag (trusted as-is)

        Returns:
            (url, archive format)
        """
        asset = self.asset_for(platform_id)
        if not version or version == LATEST:
            url = self.url_latest.format(asset=asset)
        else:
            url = self.url_pinned.format(asset=asset, version=version)
        return url, ArchiveFormat.from_name(asset)


UV = ToolSlot(
    name='uv',
    binary_name='uv',
    minimum_version=SemVer(0, 6, 0),
    artifacts={
        'macos-aarch64': 'uv-aarch64-apple-darwin.tar.gz',
        'macos-x86_64': 'uv-x86_64-apple-darwin.tar.gz',
        'linux-x86_64': 'uv-x86_64-unknown-linux-gnu.tar.gz',
        'linux-aarch64': 'uv-aarch64-unknown-linux-gnu.tar.gz',
        'windows-x86_64': 'uv-x86_64-pc-windows-msvc.zip',
        'windows-aarch64': 'uv-aarch64-pc-windows-msvc.zip',
    },
    url_latest='https://github.com/astral-sh/uv/releases/latest/download/{asset}',
    url_pinned='https://github.com/astral-sh/uv/releases/download/{version}/{asset}',
    companions=('uvx',),
)

FNM = ToolSlot(
    name='fnm',
    binary_name='fnm',
    artifacts={
        'macos-aarch64': 'fnm-macos.zip',
        'macos-x86_64': 'fnm-macos.zip',
        'linux-x86_64': 'fnm-linux.zip',
        'linux-aarch64': 'fnm-arm64.zip',
        'windows-x86_64': 'fnm-windows.zip',
        # fnm publishes no windows-arm64 build
    },
    url_latest='https://github.com/Schniz/fnm/releases/latest/download/{asset}',
    url_pinned='https://github.com/Schniz/fnm/releases/download/{version}/{asset}',
)

# Installed through uv; the requested version is matched by `uv python find`
PYTHON = ToolSlot(name='python', binary_name='python')

# Installed through fnm; a system node at or above the floor is accepted
NODE = ToolSlot(name='node', binary_name='node', minimum_version=SemVer(20, 0, 0))

ALL_SLOTS = (UV, PYTHON, FNM, NODE)

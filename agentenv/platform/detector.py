#!/usr/bin/env python3
"""
agent-environment Platform Detection
Maps the running OS and CPU architecture to a normalized platform id
"""

import os
import platform
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from agentenv.errors import UnsupportedPlatform


class OSType(Enum):
    """Operating system families"""
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"


class Arch(Enum):
    """CPU architecture families"""
    X86_64 = "x86_64"
    AARCH64 = "aarch64"


# uname -m / platform.machine() spellings, lowercased
ARCH_ALIASES = {
    'x86_64': Arch.X86_64,
    'amd64': Arch.X86_64,
    'x64': Arch.X86_64,
    'aarch64': Arch.AARCH64,
    'arm64': Arch.AARCH64,
}

# Prefixes of uname -s / platform.system(), lowercased
OS_PREFIXES = (
    ('linux', OSType.LINUX),
    ('darwin', OSType.MACOS),
    ('windows', OSType.WINDOWS),
    ('mingw', OSType.WINDOWS),    # Git Bash
    ('msys', OSType.WINDOWS),
    ('cygwin', OSType.WINDOWS),
)


@dataclass(frozen=True)
class PlatformId:
    """Normalized platform used to pick download artifacts"""
    os: OSType
    arch: Arch

    @property
    def key(self) -> str:
        return f"{self.os.value}-{self.arch.value}"

    @property
    def is_windows(self) -> bool:
        return self.os == OSType.WINDOWS

    def __str__(self) -> str:
        return self.key


class PlatformDetector:
    """
    Detect the normalized platform id

    The raw system/machine strings can be injected; by default they come
    from the platform module.
    """

    def __init__(self, system: Optional[str] = None, machine: Optional[str] = None):
        self.system = system if system is not None else platform.system()
        self.machine = machine if machine is not None else platform.machine()
        self.info: Optional[PlatformId] = None

    def detect(self) -> PlatformId:
        """
        Perform platform detection

        Returns:
            PlatformId for the current OS/CPU

        Raises:
            UnsupportedPlatform: OS or architecture is not one we ship for
        """
        self.info = PlatformId(os=self._detect_os(), arch=self._detect_arch())
        return self.info

    def _detect_os(self) -> OSType:
        system = self.system.lower()
        for prefix, os_type in OS_PREFIXES:
            if system.startswith(prefix):
                return os_type
        raise UnsupportedPlatform(f"Unsupported OS: {self.system or 'unknown'}")

    def _detect_arch(self) -> Arch:
        arch = ARCH_ALIASES.get(self.machine.lower())
        if arch is None:
            raise UnsupportedPlatform(f"Unsupported architecture: {self.machine or 'unknown'}")
        return arch


def executable_name(name: str, platform_id: PlatformId) -> str:
    """Binary file name for a tool on the given platform"""
    if platform_id.is_windows and not name.lower().endswith('.exe'):
        return f"{name}.exe"
    return name


def detect_shell(platform_id: Optional[PlatformId] = None) -> str:
    """Detect the user's login shell (basename only)"""
    shell = os.environ.get('SHELL', '')
    if shell:
        return Path(shell).name

    # Windows fallback
    if platform_id is not None and platform_id.is_windows:
        if 'PSModulePath' in os.environ:
            return 'powershell'
        return 'cmd'

    return 'unknown'


# Platform does not change mid-run; detect once
_detector: Optional[PlatformDetector] = None


def get_platform() -> PlatformId:
    """Get cached platform id"""
    global _detector
    if _detector is None or _detector.info is None:
        _detector = PlatformDetector()
        _detector.detect()
    return _detector.info


def detect_platform(system: Optional[str] = None, machine: Optional[str] = None) -> PlatformId:
    """Force fresh platform detection"""
    global _detector
    _detector = PlatformDetector(system, machine)
    return _detector.detect()

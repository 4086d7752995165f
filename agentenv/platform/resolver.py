#!/usr/bin/env python3
"""
agent-environment Tool Resolver
Decides which binary satisfies a tool slot: system, then local, then download
"""

import os
import shutil
import stat
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from agentenv.console import debug, info, ok
from agentenv.errors import BinaryNotFoundInArchive
from agentenv.layout import InstallRoot
from agentenv.platform.detector import PlatformId, executable_name
from agentenv.platform.fetcher import Fetcher, find_binary
from agentenv.platform.runner import ToolRunner
from agentenv.platform.tools import LATEST, ToolSlot
from agentenv.platform.version import SemVer, at_least, parse

VERSION_PROBE_TIMEOUT = 30


class Origin(Enum):
    """Where a resolved binary came from"""
    SYSTEM = "system"
    LOCAL = "local"
    DOWNLOADED = "downloaded"


@dataclass(frozen=True)
class ResolvedTool:
    """The binary chosen for a slot in this run"""
    slot: ToolSlot
    path: Path
    origin: Origin
    version: Optional[SemVer] = None

    def describe(self) -> str:
        if self.version is not None:
            return f"{self.path} ({self.version})"
        return str(self.path)


@dataclass(frozen=True)
class CandidateCheck:
    """Verdict on one candidate binary"""
    accepted: bool
    version: Optional[SemVer] = None
    reason: str = ''


class ToolResolver:
    """
    Resolve tool slots against the machine and the install root

    Stages run in a fixed priority order and stop at the first accepted
    candidate:

    1. system - the binary found on PATH
    2. local - <root>/bin/<binary> from an earlier run
    3. download - fetch the release artifact for this platform

    A candidate whose version cannot be parsed is rejected the same way as
    one that is too old; the run then falls through to the next stage.
    """

    def __init__(self, root: InstallRoot, platform_id: PlatformId,
                 runner: ToolRunner, fetcher: Fetcher,
                 search_path: Optional[str] = None):
        """
        Args:
            root: Install root that owns bin/
            platform_id: Detected platform
            runner: Runs version probes
            fetcher: Downloads and unpacks release archives
            search_path: PATH string for the system stage (None = os.environ PATH)
        """
        self.root = root
        self.platform = platform_id
        self.runner = runner
        self.fetcher = fetcher
        self.search_path = search_path

    def resolve(self, slot: ToolSlot, version: str = LATEST) -> ResolvedTool:
        """
        Run the system -> local -> download chain for one slot

        Args:
            slot: Tool to resolve
            version: Release to download if nothing usable exists ('latest' or a tag)

        Returns:
            ResolvedTool with its origin
        """
        info(f"Resolving {slot.name}...")

        resolved = self.find_system(slot)
        if resolved is None:
            resolved = self.find_local(slot)
        if resolved is None:
            resolved = self.download(slot, version)
        return resolved

    def find_system(self, slot: ToolSlot) -> Optional[ResolvedTool]:
        """System stage: look the binary up on PATH"""
        found = shutil.which(slot.binary_name, path=self.search_path)
        if not found:
            debug(f"{slot.name} not found on PATH")
            return None

        path = Path(found)
        check = self.check_candidate(slot, path)
        if not check.accepted:
            info(f"Ignoring system {slot.name} at {path}: {check.reason}")
            return None

        resolved = ResolvedTool(slot, path, Origin.SYSTEM, check.version)
        ok(f"Using system {slot.name}: {resolved.describe()}")
        return resolved

    def find_local(self, slot: ToolSlot) -> Optional[ResolvedTool]:
        """Local stage: reuse <root>/bin/<binary> from an earlier run"""
        path = self.root.local_binary(slot.binary_name, self.platform)
        if not self._is_executable(path):
            debug(f"No local {slot.name} at {path}")
            return None

        check = self.check_candidate(slot, path)
        if not check.accepted:
            info(f"Ignoring local {slot.name} at {path}: {check.reason}")
            return None

        resolved = ResolvedTool(slot, path, Origin.LOCAL, check.version)
        ok(f"Using local {slot.name}: {resolved.describe()}")
        return resolved

    def check_candidate(self, slot: ToolSlot, path: Path) -> CandidateCheck:
        """
        Apply the slot's version floor to a candidate binary

        Slots without a floor accept any present binary without running it.
        """
        if slot.minimum_version is None:
            return CandidateCheck(True)

        version = self.probe_version(slot, path)
        if version is None:
            return CandidateCheck(False, None, "could not determine its version")
        if not at_least(version, slot.minimum_version):
            return CandidateCheck(
                False, version, f"version {version} is older than required {slot.minimum_version}"
            )
        return CandidateCheck(True, version)

    def probe_version(self, slot: ToolSlot, path: Path) -> Optional[SemVer]:
        """Run the slot's version command and parse the banner"""
        result = self.runner.run([str(path), *slot.version_args], timeout=VERSION_PROBE_TIMEOUT)
        if not result.ok:
            debug(f"{path} {' '.join(slot.version_args)} exited {result.returncode}")
            return None
        return parse(result.stdout) or parse(result.stderr)

    def download(self, slot: ToolSlot, version: str = LATEST) -> ResolvedTool:
        """
        Download stage: fetch, unpack in scratch space, install into bin/

        The scratch directory is removed whether or not installation succeeds.
        """
        url, archive_format = slot.download_url(self.platform, version)
        info(f"Downloading {slot.name} ({version or LATEST}) from {url}")

        binary_file = executable_name(slot.binary_name, self.platform)
        with tempfile.TemporaryDirectory(prefix=f"agentenv-{slot.name}-") as scratch:
            scratch_dir = Path(scratch)
            archive = scratch_dir / url.rsplit('/', 1)[-1]
            self.fetcher.fetch(url, archive)
            tree = self.fetcher.unpack(archive, archive_format, scratch_dir / 'extract')

            found = find_binary(tree, binary_file)
            if found is None:
                raise BinaryNotFoundInArchive(binary_file, archive.name)

            self.root.bin_dir.mkdir(parents=True, exist_ok=True)
            target = self._install_file(found, self.root.bin_dir / binary_file)

            for companion in slot.companions:
                companion_file = executable_name(companion, self.platform)
                companion_path = find_binary(tree, companion_file)
                if companion_path is not None:
                    self._install_file(companion_path, self.root.bin_dir / companion_file)
                    debug(f"Installed {companion_file} alongside {slot.name}")

        # Downloaded artifacts are trusted; the probe is informational only
        resolved = ResolvedTool(slot, target, Origin.DOWNLOADED, self.probe_version(slot, target))
        ok(f"{slot.name} installed: {resolved.describe()}")
        return resolved

    def _is_executable(self, path: Path) -> bool:
        if not path.is_file():
            return False
        return self.platform.is_windows or os.access(path, os.X_OK)

    @staticmethod
    def _install_file(source: Path, target: Path) -> Path:
        """Copy next to the target, mark executable, then rename over it"""
        staging = target.with_name(f".{target.name}.tmp")
        try:
            shutil.copyfile(source, staging)
            mode = staging.stat().st_mode
            staging.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            os.replace(staging, target)
        except Exception:
            staging.unlink(missing_ok=True)
            raise
        return target

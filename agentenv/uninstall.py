#!/usr/bin/env python3
"""
agent-environment Uninstaller
Removes what the installer created and nothing else
"""

import shutil
from pathlib import Path
from typing import List, Optional

from agentenv.console import info, ok
from agentenv.layout import OWNED_DIRS, OWNED_FILES, InstallRoot
from agentenv.platform.detector import PlatformId
from agentenv.profile import ProfilePatcher, cleanup_profiles


class Uninstaller:
    """Allow-listed removal from the install root plus profile cleanup"""

    def __init__(self, root: InstallRoot, platform_id: PlatformId, shell: str,
                 home: Optional[Path] = None, patcher: Optional[ProfilePatcher] = None):
        self.root = root
        self.platform = platform_id
        self.shell = shell
        self.home = home
        self.patcher = patcher or ProfilePatcher()

    def _owned(self, name: str) -> Path:
        path = self.root.path / name
        # Allow-list entries are plain names; never let one climb out of the root
        if path.parent != self.root.path:
            raise ValueError(f"Refusing to remove {path}: outside {self.root.path}")
        return path

    def remove_installed_files(self) -> List[Path]:
        """
        Delete allow-listed entries, then the root if it ended up empty

        Returns:
            Paths removed
        """
        info(f"Removing installed files from {self.root}...")
        removed = []

        for name in OWNED_DIRS:
            path = self._owned(name)
            if path.is_symlink():
                path.unlink()
            elif path.is_dir():
                shutil.rmtree(path)
            else:
                continue
            ok(f"Removed {path}")
            removed.append(path)

        for name in OWNED_FILES:
            path = self._owned(name)
            if path.is_file() or path.is_symlink():
                path.unlink()
                ok(f"Removed {path}")
                removed.append(path)

        if self.root.path.is_dir():
            if any(self.root.path.iterdir()):
                info(f"{self.root} still contains other files, keeping it.")
            else:
                self.root.path.rmdir()
                ok(f"Removed empty directory {self.root}")
                removed.append(self.root.path)

        return removed

    def clean_shell_profiles(self) -> List[Path]:
        """Strip the activation block from the shell profile(s)"""
        info("Cleaning shell profiles...")
        return [
            profile for profile in cleanup_profiles(self.shell, self.platform, self.home)
            if self.patcher.clean(profile)
        ]

    def run(self) -> List[Path]:
        """Full uninstall; safe to repeat"""
        removed = self.remove_installed_files()
        self.clean_shell_profiles()
        return removed

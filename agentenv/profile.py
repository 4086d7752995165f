#!/usr/bin/env python3
"""
agent-environment Shell Profile Patching
Adds / removes the marker-guarded activation line in the user's shell rc file
"""

from pathlib import Path
from typing import List, Optional

from agentenv.console import info, ok
from agentenv.platform.detector import OSType, PlatformId

MARKER = '# agent-environment'

COMMON_PROFILES = ('.zshrc', '.bashrc', '.bash_profile', '.profile')


def powershell_profile(home: Path, platform_id: PlatformId) -> Path:
    """Current-user, current-host $PROFILE for PowerShell 7"""
    if platform_id.is_windows:
        return home / 'Documents' / 'PowerShell' / 'Microsoft.PowerShell_profile.ps1'
    return home / '.config' / 'powershell' / 'Microsoft.PowerShell_profile.ps1'


def _known_shell_profile(shell: str, platform_id: PlatformId, home: Path) -> Optional[Path]:
    if shell == 'zsh':
        return home / '.zshrc'
    if shell == 'bash':
        if platform_id.os == OSType.MACOS:
            return home / '.bash_profile'
        return home / '.bashrc'
    if shell in ('powershell', 'pwsh'):
        return powershell_profile(home, platform_id)
    return None


def target_profile(shell: str, platform_id: PlatformId, home: Optional[Path] = None) -> Path:
    """
    Pick the one profile file to patch

    Args:
        shell: Basename of the login shell ('zsh', 'bash', ...)
        platform_id: Detected platform (bash on macOS reads .bash_profile)
        home: Home directory (default: Path.home())

    Returns:
        Profile path; it may not exist yet
    """
    home = home or Path.home()
    known = _known_shell_profile(shell, platform_id, home)
    if known is not None:
        return known

    # Unknown shell: first common profile that exists
    for name in COMMON_PROFILES[:-1]:
        candidate = home / name
        if candidate.is_file():
            return candidate
    return home / '.profile'


def cleanup_profiles(shell: str, platform_id: PlatformId, home: Optional[Path] = None) -> List[Path]:
    """Profiles the uninstaller should clean: the shell's own, or every common one"""
    home = home or Path.home()
    known = _known_shell_profile(shell, platform_id, home)
    if known is not None:
        return [known]
    return [home / name for name in COMMON_PROFILES]


class ProfilePatcher:
    """Marker-guarded two-line block in a shell profile"""

    def __init__(self, marker: str = MARKER):
        self.marker = marker

    def is_patched(self, profile: Path) -> bool:
        if not profile.is_file():
            return False
        return self.marker in profile.read_text(encoding='utf-8', errors='replace')

    def patch(self, profile: Path, source_line: str) -> bool:
        """
        Append the marker and source line unless the marker is already there

        Returns:
            True if the profile was changed
        """
        if self.is_patched(profile):
            info(f"Already configured in {profile}")
            return False

        profile.parent.mkdir(parents=True, exist_ok=True)
        with open(profile, 'a', encoding='utf-8') as f:
            f.write(f"\n{self.marker}\n{source_line}\n")

        ok(f"Added to {profile}")
        info(f"Run 'source {profile}' or restart your terminal to activate.")
        return True

    def clean(self, profile: Path) -> bool:
        """
        Remove each marker line and the single line after it

        Every other line, blank ones included, is kept byte for byte.

        Returns:
            True if the profile was changed
        """
        if not self.is_patched(profile):
            return False

        with open(profile, 'r', encoding='utf-8', errors='replace', newline='') as f:
            lines = f.readlines()

        kept = []
        skip_next = False
        for line in lines:
            if skip_next:
                skip_next = False
                continue
            if self.marker in line:
                skip_next = True
                continue
            kept.append(line)

        with open(profile, 'w', encoding='utf-8', newline='') as f:
            f.writelines(kept)

        ok(f"Cleaned {profile}")
        return True

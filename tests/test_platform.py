"""
Tests for platform detection
"""
import pytest

from agentenv.errors import UnsupportedPlatform
from agentenv.platform.detector import (
    Arch,
    OSType,
    PlatformDetector,
    PlatformId,
    detect_platform,
    detect_shell,
    executable_name,
)


class TestDetect:
    """OS / architecture normalization"""

    @pytest.mark.parametrize('system,expected', [
        ('Linux', OSType.LINUX),
        ('Darwin', OSType.MACOS),
        ('Windows', OSType.WINDOWS),
        ('MINGW64_NT-10.0', OSType.WINDOWS),
        ('MSYS_NT-10.0', OSType.WINDOWS),
        ('CYGWIN_NT-10.0', OSType.WINDOWS),
    ])
    def test_os_aliases(self, system, expected):
        assert PlatformDetector(system, 'x86_64').detect().os == expected

    @pytest.mark.parametrize('machine,expected', [
        ('x86_64', Arch.X86_64),
        ('AMD64', Arch.X86_64),
        ('aarch64', Arch.AARCH64),
        ('arm64', Arch.AARCH64),
    ])
    def test_arch_aliases(self, machine, expected):
        assert PlatformDetector('Linux', machine).detect().arch == expected

    def test_unsupported_os(self):
        with pytest.raises(UnsupportedPlatform, match='FreeBSD'):
            PlatformDetector('FreeBSD', 'x86_64').detect()

    def test_unsupported_arch(self):
        with pytest.raises(UnsupportedPlatform, match='armv7l'):
            PlatformDetector('Linux', 'armv7l').detect()

    def test_repeatable(self):
        assert detect_platform('Darwin', 'arm64') == detect_platform('Darwin', 'arm64')

    def test_key(self):
        assert PlatformId(OSType.MACOS, Arch.AARCH64).key == 'macos-aarch64'


class TestHelpers:
    """Executable naming and shell detection"""

    def test_exe_suffix_on_windows(self):
        assert executable_name('uv', PlatformId(OSType.WINDOWS, Arch.X86_64)) == 'uv.exe'

    def test_no_suffix_elsewhere(self):
        assert executable_name('uv', PlatformId(OSType.LINUX, Arch.X86_64)) == 'uv'

    def test_shell_from_env(self, monkeypatch):
        monkeypatch.setenv('SHELL', '/usr/bin/zsh')
        assert detect_shell() == 'zsh'

    def test_windows_shell_fallback(self, monkeypatch):
        monkeypatch.delenv('SHELL', raising=False)
        monkeypatch.setenv('PSModulePath', 'C:\\modules')
        assert detect_shell(PlatformId(OSType.WINDOWS, Arch.X86_64)) == 'powershell'

    def test_unknown_shell(self, monkeypatch):
        monkeypatch.delenv('SHELL', raising=False)
        assert detect_shell(PlatformId(OSType.LINUX, Arch.X86_64)) == 'unknown'

"""
Shared fixtures for agent-environment tests

No test touches the network or runs a real uv/fnm/node: the runner and
fetcher capabilities are replaced with the fakes below.
"""
import io
import shutil
import tarfile
import zipfile
from pathlib import Path

import pytest

from agentenv.layout import InstallRoot
from agentenv.platform.detector import Arch, OSType, PlatformId
from agentenv.platform.fetcher import Fetcher, HttpFetcher
from agentenv.platform.runner import CommandResult, ToolRunner


class FakeRunner(ToolRunner):
    """Scripted ToolRunner: responses are matched on an argv prefix"""

    def __init__(self):
        self.calls = []
        self._responses = []

    def on(self, *prefix, returncode=0, stdout='', stderr=''):
        self._responses.append((tuple(str(p) for p in prefix),
                                CommandResult(returncode, stdout, stderr)))
        return self

    def run(self, cmd, env=None, timeout=None):
        argv = [str(part) for part in cmd]
        self.calls.append((argv, dict(env or {})))
        # Most recent registration wins so tests can override earlier setup
        for prefix, result in reversed(self._responses):
            if tuple(argv[:len(prefix)]) == prefix:
                return result
        return CommandResult(127, '', f"{argv[0]}: command not found")

    @property
    def commands(self):
        return [argv for argv, _ in self.calls]

    def ran(self, *args):
        """True if any call contained args as a contiguous sequence"""
        wanted = [str(a) for a in args]
        for argv in self.commands:
            for i in range(len(argv) - len(wanted) + 1):
                if argv[i:i + len(wanted)] == wanted:
                    return True
        return False


class FakeFetcher(Fetcher):
    """Serves prebuilt archives by URL; unpacking is the real implementation"""

    def __init__(self, archives=None, error=None):
        self.archives = dict(archives or {})
        self.error = error
        self.fetched = []
        self._unpacker = HttpFetcher(session=object())

    def fetch(self, url, dest):
        self.fetched.append(url)
        if self.error is not None:
            raise self.error
        shutil.copyfile(self.archives[url], dest)
        return dest

    def unpack(self, archive, archive_format, dest_dir):
        return self._unpacker.unpack(archive, archive_format, dest_dir)


@pytest.fixture
def linux():
    return PlatformId(OSType.LINUX, Arch.X86_64)


@pytest.fixture
def root(tmp_path):
    return InstallRoot.at(tmp_path / 'agents')


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def sysbin(tmp_path):
    """Empty directory standing in for the system PATH"""
    path = tmp_path / 'sysbin'
    path.mkdir()
    return path


@pytest.fixture
def make_executable():
    def _create(path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text('#!/bin/sh\nexit 0\n')
        path.chmod(0o755)
        return path
    return _create


@pytest.fixture
def make_tar_gz(tmp_path):
    """Build a .tar.gz from {member name: bytes}"""
    def _create(name: str, members: dict) -> Path:
        path = tmp_path / 'archives' / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with tarfile.open(path, 'w:gz') as tar:
            for member_name, data in members.items():
                info = tarfile.TarInfo(member_name)
                info.size = len(data)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(data))
        return path
    return _create


@pytest.fixture
def make_zip(tmp_path):
    """Build a .zip from {member name: bytes}"""
    def _create(name: str, members: dict) -> Path:
        path = tmp_path / 'archives' / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, 'w') as zf:
            for member_name, data in members.items():
                zf.writestr(member_name, data)
        return path
    return _create


@pytest.fixture
def uv_archive(make_tar_gz):
    """uv release layout: binaries nested under the target-triple directory"""
    return make_tar_gz('uv-x86_64-unknown-linux-gnu.tar.gz', {
        'uv-x86_64-unknown-linux-gnu/uv': b'uv-binary',
        'uv-x86_64-unknown-linux-gnu/uvx': b'uvx-binary',
    })


@pytest.fixture
def fnm_archive(make_zip):
    """fnm release layout: the binary at the archive root"""
    return make_zip('fnm-linux.zip', {'fnm': b'fnm-binary'})


@pytest.fixture
def fake_fetcher():
    return FakeFetcher

#!/usr/bin/env python3
"""
agent-environment Fetcher
Download release archives over HTTP and unpack them safely
"""

import os
import tarfile
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from agentenv import __version__
from agentenv.console import debug, warn
from agentenv.errors import ArchiveExtractionFailure, DownloadFailure
from agentenv.platform.tools import ArchiveFormat

CHUNK_SIZE = 8192

# Python 3.12+ warns when tar extraction runs without an explicit filter
_TAR_EXTRACT_ARGS = {'filter': 'data'} if hasattr(tarfile, 'data_filter') else {}


class Fetcher(ABC):
    """Retrieve bytes for a URL and unpack archives"""

    @abstractmethod
    def fetch(self, url: str, dest: Path) -> Path:
        """
        Download url into dest

        Raises:
            DownloadFailure: transport error after retries
        """

    @abstractmethod
    def unpack(self, archive: Path, archive_format: ArchiveFormat, dest_dir: Path) -> Path:
        """
        Unpack archive into dest_dir

        Raises:
            ArchiveExtractionFailure: corrupt or unreadable archive
        """


def _is_within(base: Path, target: Path) -> bool:
    base_real = os.path.realpath(base)
    target_real = os.path.realpath(target)
    return target_real == base_real or target_real.startswith(base_real + os.sep)


class HttpFetcher(Fetcher):
    """
    Fetcher backed by a requests session

    Retries live in the transport adapter only; a failure that survives
    them is final for the run.
    """

    def __init__(self, timeout: float = 60.0, retries: int = 3,
                 session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or self._build_session(retries)

    @staticmethod
    def _build_session(retries: int) -> requests.Session:
        retry = Retry(
            total=max(0, retries),
            backoff_factor=0.5,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=frozenset(['GET']),
        )
        session = requests.Session()
        adapter = HTTPAdapter(max_retries=retry)
        session.mount('https://', adapter)
        session.mount('http://', adapter)
        session.headers['User-Agent'] = f"agent-environment/{__version__}"
        return session

    def fetch(self, url: str, dest: Path) -> Path:
        debug(f"GET {url} -> {dest}")
        try:
            with self.session.get(url, stream=True, timeout=self.timeout, allow_redirects=True) as response:
                response.raise_for_status()
                expected = int(response.headers.get('content-length', 0) or 0)
                written = 0
                with open(dest, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
                            written += len(chunk)
        except requests.exceptions.RequestException as e:
            raise DownloadFailure(f"Download failed for {url}: {e}") from e
        except OSError as e:
            raise DownloadFailure(f"Could not write download to {dest}: {e}") from e

        if expected and written != expected:
            raise DownloadFailure(
                f"Download of {url} truncated: got {written} of {expected} bytes"
            )
        return dest

    def unpack(self, archive: Path, archive_format: ArchiveFormat, dest_dir: Path) -> Path:
        dest_dir.mkdir(parents=True, exist_ok=True)
        try:
            if archive_format == ArchiveFormat.TAR_GZ:
                self._unpack_tar(archive, dest_dir)
            elif archive_format == ArchiveFormat.ZIP:
                self._unpack_zip(archive, dest_dir)
            else:
                raise ArchiveExtractionFailure(f"Unsupported archive format: {archive_format}")
        except (tarfile.TarError, zipfile.BadZipFile, EOFError, OSError) as e:
            raise ArchiveExtractionFailure(f"Failed to extract {archive.name}: {e}") from e
        return dest_dir

    @staticmethod
    def _unpack_tar(archive: Path, dest_dir: Path):
        with tarfile.open(archive, 'r:gz') as tar:
            for member in tar.getmembers():
                if member.issym() or member.islnk() or member.isdev():
                    debug(f"Skipping link/device entry in tar: {member.name}")
                    continue
                if not _is_within(dest_dir, dest_dir / member.name):
                    warn(f"Skipping unsafe path in tar: {member.name}")
                    continue
                tar.extract(member, path=dest_dir, **_TAR_EXTRACT_ARGS)

    @staticmethod
    def _unpack_zip(archive: Path, dest_dir: Path):
        with zipfile.ZipFile(archive, 'r') as zip_ref:
            for member in zip_ref.infolist():
                if not _is_within(dest_dir, dest_dir / member.filename):
                    warn(f"Skipping unsafe path in zip: {member.filename}")
                    continue
                # Directories are created as their files are extracted
                if not member.is_dir():
                    zip_ref.extract(member, path=dest_dir)


def find_binary(tree: Path, name: str) -> Optional[Path]:
    """
    Locate an executable by file name anywhere under tree

    Release layouts move between versions (uv nests under a target-triple
    directory, fnm does not), so the search is recursive. The shallowest
    match wins.
    """
    matches = [
        path for path in tree.rglob('*')
        if path.is_file() and path.name.lower() == name.lower()
    ]
    if not matches:
        return None
    return min(matches, key=lambda path: (len(path.parts), str(path)))

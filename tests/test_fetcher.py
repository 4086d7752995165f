"""
Tests for the HTTP fetcher and archive unpacking
"""
import tarfile
import warnings

import pytest
import requests

from agentenv.errors import ArchiveExtractionFailure, DownloadFailure
from agentenv.platform.fetcher import HttpFetcher, find_binary
from agentenv.platform.tools import ArchiveFormat


class FakeResponse:
    def __init__(self, chunks, status=200, content_length=None):
        self.chunks = chunks
        self.status = status
        self.headers = {}
        if content_length is not None:
            self.headers['content-length'] = str(content_length)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.exceptions.HTTPError(f"{self.status} Error")

    def iter_content(self, chunk_size=1):
        return iter(self.chunks)


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, **kwargs):
        self.requests.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


class TestFetch:

    def test_writes_body(self, tmp_path):
        session = FakeSession(FakeResponse([b'abc', b'def'], content_length=6))
        dest = tmp_path / 'out.bin'

        HttpFetcher(session=session).fetch('https://example.invalid/a', dest)

        assert dest.read_bytes() == b'abcdef'
        assert session.requests[0][1]['stream'] is True

    def test_http_error(self, tmp_path):
        session = FakeSession(FakeResponse([], status=404))

        with pytest.raises(DownloadFailure, match='404'):
            HttpFetcher(session=session).fetch('https://example.invalid/a', tmp_path / 'x')

    def test_connection_error(self, tmp_path):
        session = FakeSession(error=requests.exceptions.ConnectionError('refused'))

        with pytest.raises(DownloadFailure, match='refused'):
            HttpFetcher(session=session).fetch('https://example.invalid/a', tmp_path / 'x')

    def test_truncated_body(self, tmp_path):
        session = FakeSession(FakeResponse([b'abc'], content_length=10))

        with pytest.raises(DownloadFailure, match='truncated'):
            HttpFetcher(session=session).fetch('https://example.invalid/a', tmp_path / 'x')

    def test_timeout_passed_through(self, tmp_path):
        session = FakeSession(FakeResponse([b'x']))

        HttpFetcher(timeout=12.5, session=session).fetch('https://example.invalid/a', tmp_path / 'x')

        assert session.requests[0][1]['timeout'] == 12.5

    def test_transport_retries_configured(self):
        fetcher = HttpFetcher(retries=2)

        adapter = fetcher.session.get_adapter('https://github.com/')

        assert adapter.max_retries.total == 2


class TestUnpack:

    def test_tar(self, tmp_path, make_tar_gz):
        archive = make_tar_gz('a.tar.gz', {'dir/tool': b'bin'})

        out = HttpFetcher(session=object()).unpack(archive, ArchiveFormat.TAR_GZ, tmp_path / 'out')

        assert (out / 'dir' / 'tool').read_bytes() == b'bin'

    def test_tar_extraction_emits_no_deprecation_warning(self, tmp_path, make_tar_gz):
        archive = make_tar_gz('a.tar.gz', {'tool': b'bin'})

        with warnings.catch_warnings():
            warnings.simplefilter('error', DeprecationWarning)
            out = HttpFetcher(session=object()).unpack(archive, ArchiveFormat.TAR_GZ, tmp_path / 'out')

        assert (out / 'tool').read_bytes() == b'bin'

    def test_zip(self, tmp_path, make_zip):
        archive = make_zip('a.zip', {'tool': b'bin', 'nested/': b''})

        out = HttpFetcher(session=object()).unpack(archive, ArchiveFormat.ZIP, tmp_path / 'out')

        assert (out / 'tool').read_bytes() == b'bin'

    def test_tar_traversal_skipped(self, tmp_path, make_tar_gz):
        archive = make_tar_gz('evil.tar.gz', {'../evil.txt': b'x', 'ok.txt': b'y'})

        out = HttpFetcher(session=object()).unpack(archive, ArchiveFormat.TAR_GZ, tmp_path / 'out')

        assert (out / 'ok.txt').exists()
        assert not (tmp_path / 'evil.txt').exists()

    def test_zip_traversal_skipped(self, tmp_path, make_zip):
        archive = make_zip('evil.zip', {'../evil.txt': b'x', 'ok.txt': b'y'})

        out = HttpFetcher(session=object()).unpack(archive, ArchiveFormat.ZIP, tmp_path / 'out')

        assert (out / 'ok.txt').exists()
        assert not (tmp_path / 'evil.txt').exists()

    def test_tar_symlink_skipped(self, tmp_path):
        archive = tmp_path / 'link.tar.gz'
        with tarfile.open(archive, 'w:gz') as tar:
            link = tarfile.TarInfo('uv')
            link.type = tarfile.SYMTYPE
            link.linkname = '/etc/passwd'
            tar.addfile(link)

        out = HttpFetcher(session=object()).unpack(archive, ArchiveFormat.TAR_GZ, tmp_path / 'out')

        assert not (out / 'uv').exists()

    def test_corrupt_archive(self, tmp_path):
        archive = tmp_path / 'bad.tar.gz'
        archive.write_bytes(b'definitely not gzip')

        with pytest.raises(ArchiveExtractionFailure):
            HttpFetcher(session=object()).unpack(archive, ArchiveFormat.TAR_GZ, tmp_path / 'out')

    def test_corrupt_zip(self, tmp_path):
        archive = tmp_path / 'bad.zip'
        archive.write_bytes(b'PK nope')

        with pytest.raises(ArchiveExtractionFailure):
            HttpFetcher(session=object()).unpack(archive, ArchiveFormat.ZIP, tmp_path / 'out')


class TestFindBinary:

    def test_recursive(self, tmp_path):
        (tmp_path / 'a' / 'b').mkdir(parents=True)
        (tmp_path / 'a' / 'b' / 'uv').write_bytes(b'')

        assert find_binary(tmp_path, 'uv') == tmp_path / 'a' / 'b' / 'uv'

    def test_shallowest_wins(self, tmp_path):
        (tmp_path / 'deep' / 'er').mkdir(parents=True)
        (tmp_path / 'deep' / 'er' / 'fnm').write_bytes(b'deep')
        (tmp_path / 'fnm').write_bytes(b'top')

        assert find_binary(tmp_path, 'fnm') == tmp_path / 'fnm'

    def test_directory_with_same_name_ignored(self, tmp_path):
        (tmp_path / 'uv').mkdir()

        assert find_binary(tmp_path, 'uv') is None

    def test_case_insensitive(self, tmp_path):
        (tmp_path / 'UV.EXE').write_bytes(b'')

        assert find_binary(tmp_path, 'uv.exe') == tmp_path / 'UV.EXE'

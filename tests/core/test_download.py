"""
Unit tests for download module.

Tests download functionality with mocked network requests.
"""

import pytest
import requests
import responses

from dnscontrolkit.core.download import DownloadProgress, download_file
from dnscontrolkit.core.exceptions import DownloadError


class TestDownloadProgress:
    """Test DownloadProgress snapshots."""

    def test_known_size(self):
        progress = DownloadProgress(received=10 * 1048576, total=100 * 1048576, elapsed=5)

        assert progress.fraction == pytest.approx(0.1)
        assert progress.rate == pytest.approx(2 * 1048576)
        assert progress.eta == pytest.approx(45)
        assert str(progress) == "10.0 of 100.0 MiB (10%), 2.0 MiB/s, 45s left"

    def test_unknown_size(self):
        progress = DownloadProgress(received=10 * 1048576, total=0, elapsed=10)

        assert progress.fraction is None
        assert progress.eta is None
        assert str(progress) == "10.0 MiB, 1.0 MiB/s"

    def test_complete(self):
        progress = DownloadProgress(received=2048, total=2048, elapsed=1)

        assert progress.fraction == 1.0
        assert "left" not in str(progress)

    def test_zero_elapsed(self):
        assert DownloadProgress(received=0, total=100, elapsed=0).rate == 0.0


class TestDownloadFile:
    """Test download_file function."""

    @responses.activate
    def test_simple_download(self, tmp_path):
        """Test simple download."""
        url = "https://example.com/dnscontrol.tar.gz"
        content = b"archive content"
        destination = tmp_path / "dnscontrol.tar.gz"

        responses.add(
            responses.GET,
            url,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )

        result = download_file(url, destination)

        assert result == destination
        assert destination.read_bytes() == content

    @responses.activate
    def test_download_with_session(self, tmp_path):
        """Test download through a shared session."""
        url = "https://example.com/file.zip"
        responses.add(responses.GET, url, body=b"zip", status=200)

        with requests.Session() as session:
            download_file(url, tmp_path / "file.zip", session=session)

        assert (tmp_path / "file.zip").read_bytes() == b"zip"

    @responses.activate
    def test_creates_parent_directory(self, tmp_path):
        url = "https://example.com/file.bin"
        responses.add(responses.GET, url, body=b"x", status=200)

        destination = tmp_path / "nested" / "dir" / "file.bin"
        download_file(url, destination)

        assert destination.exists()

    @responses.activate
    def test_progress_callback(self, tmp_path):
        """Test the final snapshot is always reported."""
        url = "https://example.com/file.bin"
        content = b"x" * 20000
        responses.add(
            responses.GET,
            url,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )

        updates = []
        download_file(url, tmp_path / "file.bin", progress_callback=updates.append)

        assert updates
        assert updates[-1].received == len(content)
        assert updates[-1].total == len(content)
        assert updates[-1].fraction == 1.0

    @responses.activate
    def test_http_error_raises_download_error(self, tmp_path):
        """Test 404 raises DownloadError without retry."""
        url = "https://example.com/missing.tar.gz"
        responses.add(responses.GET, url, status=404)

        with pytest.raises(DownloadError, match="Failed to download"):
            download_file(url, tmp_path / "missing.tar.gz")

        assert len(responses.calls) == 1
        assert not (tmp_path / "missing.tar.gz").exists()

    @responses.activate
    def test_connection_error_raises_download_error(self, tmp_path):
        url = "https://example.com/file.tar.gz"
        responses.add(
            responses.GET, url, body=requests.exceptions.ConnectionError("refused")
        )

        with pytest.raises(DownloadError, match="refused"):
            download_file(url, tmp_path / "file.tar.gz")

    def test_empty_url(self, tmp_path):
        with pytest.raises(ValueError, match="URL cannot be empty"):
            download_file("", tmp_path / "file")

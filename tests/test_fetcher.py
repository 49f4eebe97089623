"""
Tests for source feed retrieval.

Network access is replaced with mocked ``requests.get`` responses.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from feed_splitter.errors import FeedFetchError
from feed_splitter.ingestion.fetcher import fetch_feed


class TestHttpFetch:

    @patch("feed_splitter.ingestion.fetcher.requests.get")
    def test_returns_body_bytes(self, mock_get):
        response = MagicMock()
        response.content = b"<rss/>"
        mock_get.return_value = response

        assert fetch_feed("https://feed.example.com/feed.xml", timeout=3.0) == b"<rss/>"
        response.raise_for_status.assert_called_once()
        assert mock_get.call_args.kwargs["timeout"] == 3.0

    @patch("feed_splitter.ingestion.fetcher.requests.get")
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(FeedFetchError, match="timed out"):
            fetch_feed("https://feed.example.com/feed.xml")

    @patch("feed_splitter.ingestion.fetcher.requests.get")
    def test_http_error(self, mock_get):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("502 Bad Gateway")
        mock_get.return_value = response

        with pytest.raises(FeedFetchError, match="502"):
            fetch_feed("http://feed.example.com/feed.xml")

    @patch("feed_splitter.ingestion.fetcher.requests.get")
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(FeedFetchError, match="refused"):
            fetch_feed("https://feed.example.com/feed.xml")


class TestFileFetch:

    def test_reads_file(self, tmp_path):
        path = tmp_path / "feed.xml"
        path.write_bytes(b"<rss>\xe2\x80\x99</rss>")

        assert fetch_feed(f"file://{path}") == b"<rss>\xe2\x80\x99</rss>"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FeedFetchError, match="open failed"):
            fetch_feed(f"file://{tmp_path / 'missing.xml'}")


def test_unsupported_scheme():
    with pytest.raises(FeedFetchError, match="unsupported scheme"):
        fetch_feed("ftp://feed.example.com/feed.xml")


def test_malformed_url():
    with pytest.raises(FeedFetchError, match="invalid feed URL"):
        fetch_feed("http://[::1")

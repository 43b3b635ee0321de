"""Unit tests for parsers."""

import unittest
from unittest.mock import MagicMock, patch

import requests

from briefly.errors import FeedFetchError
from briefly.parsers.rss import RSSParser


RSS_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:media="http://search.yahoo.com/mrss/"
     xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Test Feed</title>
    <link>http://example.com</link>
    <description>Test</description>
    <item>
      <title>  Chip  shortage   ends </title>
      <link>http://example.com/chips</link>
      <enclosure url="http://example.com/chips.jpg" type="image/jpeg" length="100"/>
      <description>Short summary</description>
    </item>
    <item>
      <title>Rocket lands</title>
      <link>http://example.com/rocket</link>
      <media:content url="http://example.com/rocket.jpg" medium="image"/>
    </item>
    <item>
      <title>New language released</title>
      <link>http://example.com/lang</link>
      <description>teaser</description>
      <content:encoded><![CDATA[<p>Body <img src="http://example.com/lang.png" alt=""/></p>]]></content:encoded>
    </item>
    <item>
      <description>Neither title nor link</description>
    </item>
    <item>
      <link>http://example.com/untitled</link>
      <description>Link but no headline</description>
    </item>
  </channel>
</rss>
"""


def _response(*chunks: bytes) -> MagicMock:
    resp = MagicMock()
    resp.__enter__.return_value = resp
    resp.__exit__.return_value = False
    resp.iter_content.return_value = list(chunks)
    resp.raise_for_status.return_value = None
    return resp


class TestRSSParser(unittest.TestCase):
    @patch("requests.get")
    def test_fetch_normalizes_entries(self, mock_get):
        mock_get.return_value = _response(RSS_FEED)
        parser = RSSParser(timeout=5)

        items = parser.fetch("technology", "http://example.com/rss")

        self.assertEqual(len(items), 3)
        self.assertEqual(
            [i["title"] for i in items],
            ["Chip shortage ends", "Rocket lands", "New language released"],
        )
        self.assertEqual(items[0]["enclosure_url"], "http://example.com/chips.jpg")
        self.assertIsNone(items[0]["media_url"])
        self.assertEqual(items[1]["media_url"], "http://example.com/rocket.jpg")
        self.assertIsNone(items[1]["enclosure_url"])
        self.assertIn("http://example.com/lang.png", items[2]["html"])

        _, kwargs = mock_get.call_args
        self.assertEqual(kwargs["timeout"], 5)
        self.assertIn("User-Agent", kwargs["headers"])
        self.assertTrue(kwargs["stream"])

    @patch("requests.get")
    def test_entries_without_title_are_skipped(self, mock_get):
        mock_get.return_value = _response(RSS_FEED)

        items = RSSParser().fetch("technology", "http://example.com/rss")

        self.assertTrue(all(i["title"] for i in items))
        self.assertNotIn("http://example.com/untitled", [i["link"] for i in items])

    @patch("briefly.parsers.rss.time.monotonic")
    @patch("requests.get")
    def test_slow_body_hits_overall_deadline(self, mock_get, mock_monotonic):
        mock_get.return_value = _response(b"<rss>", b"<channel>", b"</channel></rss>")
        # start, first chunk, second chunk arrives past the 10s budget
        mock_monotonic.side_effect = [0.0, 4.0, 11.0] + [12.0] * 10

        with self.assertRaises(FeedFetchError) as ctx:
            RSSParser(timeout=10).fetch("world", "http://example.com/rss")
        self.assertIn("timed out", ctx.exception.reason)

    @patch("requests.get")
    def test_network_error_raises(self, mock_get):
        mock_get.side_effect = requests.Timeout("timed out")

        with self.assertRaises(FeedFetchError) as ctx:
            RSSParser().fetch("sports", "http://example.com/rss")
        self.assertEqual(ctx.exception.source, "sports")

    @patch("requests.get")
    def test_http_error_raises(self, mock_get):
        resp = _response(b"")
        resp.raise_for_status.side_effect = requests.HTTPError("503")
        mock_get.return_value = resp

        with self.assertRaises(FeedFetchError):
            RSSParser().fetch("sports", "http://example.com/rss")

    @patch("requests.get")
    def test_malformed_feed_raises(self, mock_get):
        mock_get.return_value = _response(b"<html><body>not a feed")

        with self.assertRaises(FeedFetchError):
            RSSParser().fetch("world", "http://example.com/rss")


if __name__ == "__main__":
    unittest.main()

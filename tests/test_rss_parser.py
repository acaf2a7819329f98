"""
Tests for RSS index discovery
"""

import xml.etree.ElementTree as ET

import pytest

from vendors.adapters.parsers.rss_parser import extract_feed_links

FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <title>Veracode product updates</title>
    <link>https://docs.veracode.com/updates</link>
    <item>
      <title>CLI updates</title>
      <link>https://docs.veracode.com/updates/r/Veracode_CLI_Updates</link>
    </item>
    <item>
      <title>About product updates</title>
      <link>https://docs.veracode.com/updates/r/c_release_notes</link>
    </item>
    <item>
      <title>SCA updates</title>
      <link> https://docs.veracode.com/updates/r/c_all_sca </link>
    </item>
    <item>
      <title>CLI updates (again)</title>
      <link>https://docs.veracode.com/updates/r/Veracode_CLI_Updates</link>
    </item>
    <item>
      <title>No link</title>
    </item>
  </channel>
</rss>
"""


class TestExtractFeedLinks:

    def test_item_links_in_order_deduplicated(self):
        links = extract_feed_links(FEED)
        assert links == [
            "https://docs.veracode.com/updates/r/Veracode_CLI_Updates",
            "https://docs.veracode.com/updates/r/c_release_notes",
            "https://docs.veracode.com/updates/r/c_all_sca",
        ]

    def test_channel_link_not_included(self):
        assert "https://docs.veracode.com/updates" not in extract_feed_links(FEED)

    def test_ignored_patterns_dropped(self):
        links = extract_feed_links(FEED, ignored=("c_release_notes",))
        assert links == [
            "https://docs.veracode.com/updates/r/Veracode_CLI_Updates",
            "https://docs.veracode.com/updates/r/c_all_sca",
        ]

    def test_atom_href_links(self):
        feed = (
            '<feed xmlns="http://www.w3.org/2005/Atom">'
            '<item><link href="https://example.com/a"/></item>'
            '</feed>'
        )
        assert extract_feed_links(feed) == ["https://example.com/a"]

    def test_empty_feed(self):
        assert extract_feed_links("<rss><channel></channel></rss>") == []

    def test_malformed_xml_raises(self):
        with pytest.raises(ET.ParseError):
            extract_feed_links("<rss><channel><item>")

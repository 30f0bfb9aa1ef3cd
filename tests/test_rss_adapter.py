"""Tests for crssnt.ingestion.rss_adapter — RSS/Atom XML adapter."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from crssnt.ingestion.rss_adapter import (
    UNTITLED_FEED,
    FeedAdapter,
    _get_content,
    detect_dialect,
)
from crssnt.ingestion.normalize import PLACEHOLDER_TITLE

FEED_URL = "https://example.com/feed.xml"

# --- Sample feed XML ---

SAMPLE_RSS = """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:atom="http://www.w3.org/2005/Atom"
     xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Test Feed</title>
    <link>https://example.com/</link>
    <atom:link href="https://example.com/rss" rel="self" type="application/rss+xml"/>
    <description>All the tests</description>
    <language>en-us</language>
    <generator>HandWritten 1.0</generator>
    <lastBuildDate>Mon, 16 Jun 2025 08:00:00 GMT</lastBuildDate>
    <item>
      <title>Article One</title>
      <link>https://example.com/article-1</link>
      <description>Short teaser</description>
      <content:encoded><![CDATA[<p>Full article body.</p>]]></content:encoded>
      <pubDate>Sat, 15 Jun 2025 10:00:00 GMT</pubDate>
      <guid isPermaLink="false">article-1-guid</guid>
    </item>
    <item>
      <title>Article Two</title>
      <link>https://example.com/article-2</link>
      <description>Second article content.</description>
      <pubDate>Sat, 15 Jun 2025 12:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Permalink Only</title>
      <description>Linked through its guid.</description>
      <guid>https://example.com/article-3</guid>
    </item>
  </channel>
</rss>
"""

RSS_WITHOUT_BUILD_DATE = """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>No Build Date</title>
    <link>https://example.com/</link>
    <description>d</description>
    <item>
      <title>Old</title>
      <pubDate>Mon, 01 Jan 2024 00:00:00 GMT</pubDate>
    </item>
    <item>
      <title>New</title>
      <pubDate>Tue, 02 Jan 2024 00:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""

RSS_WITHOUT_DATES = """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title></title>
    <item><title></title><description>anonymous</description></item>
  </channel>
</rss>
"""

SAMPLE_ATOM = """\
<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Feed</title>
  <subtitle>An Atom subtitle</subtitle>
  <link href="https://example.org/" rel="alternate"/>
  <link href="https://example.org/atom.xml" rel="self"/>
  <id>urn:uuid:60a76c80-d399-11d9-b93C-0003939e0af6</id>
  <updated>2025-06-15T12:00:00Z</updated>
  <generator uri="https://gen.example/">GenTool</generator>
  <entry>
    <title>Atom Article</title>
    <link href="https://example.org/edit/1" rel="edit"/>
    <link href="https://example.org/atom-1" rel="alternate"/>
    <id>tag:example.org,2025:1</id>
    <published>2025-06-14T09:00:00Z</published>
    <updated>2025-06-15T10:00:00Z</updated>
    <summary>Atom summary.</summary>
    <content type="html">&lt;p&gt;Atom full content.&lt;/p&gt;</content>
  </entry>
  <entry>
    <title>Summary Only</title>
    <link href="https://example.org/atom-2"/>
    <id>tag:example.org,2025:2</id>
    <published>2025-06-13T09:00:00Z</published>
    <summary>Just a summary.</summary>
  </entry>
</feed>
"""

NOT_A_FEED = """\
<?xml version="1.0" encoding="UTF-8"?>
<html><body><p>Hello</p></body></html>
"""


def _parse(xml: str):
    return FeedAdapter(FEED_URL).parse(xml)


class TestDetectDialect:
    def test_rss20(self):
        assert detect_dialect("rss20") == "rss"

    def test_rss092(self):
        assert detect_dialect("rss092") == "rss"

    def test_atom(self):
        assert detect_dialect("atom10") == "atom"

    def test_rdf_is_unknown(self):
        assert detect_dialect("rss10") == "unknown"

    def test_empty_is_unknown(self):
        assert detect_dialect("") == "unknown"


class TestGetContent:
    def test_prefers_content(self):
        entry = {"content": [{"value": "<p>Full</p>"}], "summary": "Short"}
        assert _get_content(entry) == "<p>Full</p>"

    def test_falls_back_to_summary(self):
        assert _get_content({"summary": "Summary text"}) == "Summary text"

    def test_empty_content_falls_back(self):
        assert _get_content({"content": [{"value": ""}], "summary": "S"}) == "S"

    def test_returns_empty_if_nothing(self):
        assert _get_content({}) == ""


class TestRSS:
    def test_dialect_and_count(self):
        parsed = _parse(SAMPLE_RSS)
        assert parsed.dialect == "rss"
        assert len(parsed.items) == 3

    def test_items_sorted_newest_first_undated_last(self):
        titles = [i.title for i in _parse(SAMPLE_RSS).items]
        assert titles == ["Article Two", "Article One", "Permalink Only"]

    def test_item_fields(self):
        items = {i.title: i for i in _parse(SAMPLE_RSS).items}
        one = items["Article One"]
        assert one.link == "https://example.com/article-1"
        assert one.date == datetime(2025, 6, 15, 10, 0, tzinfo=timezone.utc)
        assert one.id == "article-1-guid"

    def test_prefers_encoded_content(self):
        items = {i.title: i for i in _parse(SAMPLE_RSS).items}
        assert "Full article body." in items["Article One"].description
        assert "Short teaser" not in items["Article One"].description

    def test_guid_falls_back_to_link(self):
        items = {i.title: i for i in _parse(SAMPLE_RSS).items}
        assert items["Article Two"].id == "https://example.com/article-2"

    def test_permalink_guid_used_as_link(self):
        items = {i.title: i for i in _parse(SAMPLE_RSS).items}
        item = items["Permalink Only"]
        assert item.link == "https://example.com/article-3"
        assert item.date is None

    def test_channel_metadata(self):
        meta = _parse(SAMPLE_RSS).metadata
        assert meta.title == "Test Feed"
        assert meta.link == "https://example.com/"
        assert meta.description == "All the tests"
        assert meta.language == "en-us"
        assert meta.generator == "HandWritten 1.0"
        assert meta.last_build_date == datetime(2025, 6, 16, 8, 0, tzinfo=timezone.utc)

    def test_self_link_is_feed_id(self):
        meta = _parse(SAMPLE_RSS).metadata
        assert meta.id == "https://example.com/rss"
        assert meta.feed_url == "https://example.com/rss"

    def test_build_date_falls_back_to_newest_item(self):
        meta = _parse(RSS_WITHOUT_BUILD_DATE).metadata
        assert meta.last_build_date == datetime(2024, 1, 2, tzinfo=timezone.utc)
        assert meta.id == FEED_URL

    def test_build_date_falls_back_to_now(self):
        before = datetime.now(timezone.utc) - timedelta(seconds=1)
        meta = _parse(RSS_WITHOUT_DATES).metadata
        assert meta.last_build_date >= before

    def test_blank_titles_replaced(self):
        parsed = _parse(RSS_WITHOUT_DATES)
        assert parsed.metadata.title == UNTITLED_FEED
        assert parsed.items[0].title == PLACEHOLDER_TITLE


class TestAtom:
    def test_dialect_and_count(self):
        parsed = _parse(SAMPLE_ATOM)
        assert parsed.dialect == "atom"
        assert len(parsed.items) == 2

    def test_alternate_link_chosen(self):
        item = _parse(SAMPLE_ATOM).items[0]
        assert item.link == "https://example.org/atom-1"

    def test_content_preferred_over_summary(self):
        item = _parse(SAMPLE_ATOM).items[0]
        assert "Atom full content." in item.description
        assert "Atom summary." not in item.description

    def test_summary_used_without_content(self):
        item = _parse(SAMPLE_ATOM).items[1]
        assert item.description == "Just a summary."

    def test_updated_preferred_over_published(self):
        item = _parse(SAMPLE_ATOM).items[0]
        assert item.date == datetime(2025, 6, 15, 10, 0, tzinfo=timezone.utc)

    def test_published_used_without_updated(self):
        item = _parse(SAMPLE_ATOM).items[1]
        assert item.date == datetime(2025, 6, 13, 9, 0, tzinfo=timezone.utc)

    def test_entry_id(self):
        assert _parse(SAMPLE_ATOM).items[0].id == "tag:example.org,2025:1"

    def test_feed_metadata(self):
        meta = _parse(SAMPLE_ATOM).metadata
        assert meta.title == "Atom Feed"
        assert meta.description == "An Atom subtitle"
        assert meta.link == "https://example.org/"
        assert meta.feed_url == "https://example.org/atom.xml"
        assert meta.id == "urn:uuid:60a76c80-d399-11d9-b93C-0003939e0af6"
        assert meta.last_build_date == datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)

    def test_generator_with_uri(self):
        meta = _parse(SAMPLE_ATOM).metadata
        assert meta.generator == "GenTool (https://gen.example/)"


class TestUnknownFormat:
    def test_html_yields_no_items(self):
        parsed = _parse(NOT_A_FEED)
        assert parsed.dialect == "unknown"
        assert parsed.items == []

    def test_placeholder_metadata(self):
        meta = _parse(NOT_A_FEED).metadata
        assert FEED_URL in meta.description
        assert meta.link == FEED_URL
        assert meta.last_build_date is not None

    def test_garbage_and_empty_input(self):
        assert _parse("not xml at all").dialect == "unknown"
        assert _parse("").items == []
        assert _parse(None).items == []

    def test_url_string_is_not_fetched(self):
        # Raw text that looks like a URL must be treated as content, not fetched.
        assert _parse("https://example.com/feed.xml").dialect == "unknown"

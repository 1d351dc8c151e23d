"""
SITEMAP WRITER TESTS - Fast, Deterministic, No Network

Run: pytest tests/test_sitemap_writer.py
"""

import sys
from pathlib import Path

import pytest
from lxml import etree

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from record_sitemap import MalformedFieldError, SitemapEntry
from record_sitemap.sitemap_writer import SITEMAP_NS, render_sitemap, write_sitemap

NS = {"sm": SITEMAP_NS}

ENTRIES = [
    SitemapEntry(loc="https://www.example.com/"),
    SitemapEntry(
        loc="https://www.example.com/catalog?item=12&desc=vacation",
        lastmod="2023-11-14T22:13:20+00:00",
        changefreq="weekly",
        priority=0.8,
    ),
]


# =============================================================================
# 1. RENDERING (5 tests)
# =============================================================================

def test_document_has_declaration_and_namespace():
    xml = render_sitemap(ENTRIES)
    root = etree.fromstring(xml)

    assert xml.startswith(b"<?xml")
    assert b"UTF-8" in xml.splitlines()[0]
    assert root.tag == f"{{{SITEMAP_NS}}}urlset"
    assert len(root.xpath("sm:url", namespaces=NS)) == 2


def test_optional_elements_only_when_set():
    root = etree.fromstring(render_sitemap(ENTRIES))
    first, second = root.xpath("sm:url", namespaces=NS)

    assert [etree.QName(el).localname for el in first] == ["loc"]
    assert [etree.QName(el).localname for el in second] == ["loc", "lastmod", "changefreq", "priority"]
    assert second.findtext("sm:lastmod", namespaces=NS) == "2023-11-14T22:13:20+00:00"
    assert second.findtext("sm:changefreq", namespaces=NS) == "weekly"
    assert second.findtext("sm:priority", namespaces=NS) == "0.8"


def test_loc_is_escaped_by_serializer():
    xml = render_sitemap(ENTRIES)
    root = etree.fromstring(xml)

    assert b"item=12&amp;desc=vacation" in xml
    assert root.xpath("sm:url/sm:loc/text()", namespaces=NS)[1] == ENTRIES[1].loc


def test_empty_entry_list_renders_empty_urlset():
    root = etree.fromstring(render_sitemap([]))

    assert etree.QName(root).localname == "urlset"
    assert len(root) == 0


def test_xml_illegal_characters_are_malformed():
    entries = [SitemapEntry(loc="https://www.example.com/"), SitemapEntry(loc="https://www.example.com/be\x01ta")]

    with pytest.raises(MalformedFieldError) as excinfo:
        render_sitemap(entries)

    assert excinfo.value.field == "loc"
    assert excinfo.value.record_index == 1


# =============================================================================
# 2. WRITING (1 test)
# =============================================================================

def test_write_sitemap_creates_parent_directories(tmp_path):
    path = tmp_path / "public" / "sitemap.xml"

    written = write_sitemap(ENTRIES, str(path))

    assert path.exists()
    assert written == len(path.read_bytes())
    assert etree.fromstring(path.read_bytes()).xpath("count(sm:url)", namespaces=NS) == 2

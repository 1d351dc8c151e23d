"""
1.0 Sitemap Writer Module
Serializes sitemap entries into a sitemaps.org <urlset> document.

Key features:
- lxml element building, so loc values are escaped by the serializer
- Optional child elements only written when the entry has them
- UTF-8 output with an XML declaration
"""

import logging
import os
from decimal import Decimal
from typing import Iterable, Union

from lxml import etree

from record_sitemap.entry import SitemapEntry
from record_sitemap.errors import MalformedFieldError

logger = logging.getLogger(__name__)

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
NSMAP = {None: SITEMAP_NS}


def _tag(name: str) -> str:
    return f"{{{SITEMAP_NS}}}{name}"


def format_priority(priority: Union[int, float, Decimal]) -> str:
    """Render a priority the way it was given: 0.5 -> '0.5', 1 -> '1'."""
    return str(priority)


def _add_child(parent: etree._Element, name: str, text: str, index: int) -> None:
    child = etree.SubElement(parent, _tag(name))
    try:
        child.text = text
    except ValueError as e:
        raise MalformedFieldError(name, text, str(e), record_index=index) from e


def build_urlset(entries: Iterable[SitemapEntry]) -> etree._Element:
    """
    2.0 Build the <urlset> element tree for the given entries, in order.

    Raises:
        MalformedFieldError: a value holds characters XML cannot carry
            (control characters, lone surrogates)
    """
    urlset = etree.Element(_tag("urlset"), nsmap=NSMAP)
    count = 0

    for index, entry in enumerate(entries):
        url_el = etree.SubElement(urlset, _tag("url"))
        _add_child(url_el, "loc", entry.loc, index)

        if entry.lastmod is not None:
            _add_child(url_el, "lastmod", entry.lastmod, index)
        if entry.changefreq is not None:
            _add_child(url_el, "changefreq", entry.changefreq, index)
        if entry.priority is not None:
            _add_child(url_el, "priority", format_priority(entry.priority), index)
        count += 1

    logger.debug(f"Built urlset with {count} <url> elements")
    return urlset


def render_sitemap(entries: Iterable[SitemapEntry], pretty_print: bool = True) -> bytes:
    """
    3.0 Render entries as a complete sitemap XML document (UTF-8 bytes).
    """
    urlset = build_urlset(entries)
    return etree.tostring(urlset, xml_declaration=True, encoding="UTF-8", pretty_print=pretty_print)


def write_sitemap(entries: Iterable[SitemapEntry], path: str, pretty_print: bool = True) -> int:
    """
    4.0 Write the rendered sitemap to `path`.

    The document is rendered in full before the file is opened, so a failure
    while rendering leaves any previous file untouched.

    Returns:
        Number of bytes written
    """
    content = render_sitemap(entries, pretty_print=pretty_print)

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, "wb") as f:
        f.write(content)

    logger.info(f"Wrote sitemap to {path} ({len(content):,} bytes)")
    return len(content)

# -*- test-case-name: openid_select.test.test_html_parse -*-
"""Tolerant scanning of discovery documents.

Discovery documents are HTML pages or XRDS documents served with an
arbitrary content type, so they are parsed with the lenient lxml HTML
parser.  Element and attribute names are matched case-insensitively,
attribute values may use either quote style.
"""
from io import BytesIO

from lxml import etree

__all__ = ['parseHTML', 'findProviderURI', 'findLinkHref']


def parseHTML(html):
    """Parse the document into an element tree.

    @param html: The document
    @type html: bytes or str

    @return: The root element or C{None} if nothing could be parsed.
    @rtype: lxml.etree._Element or NoneType
    """
    if isinstance(html, str):
        html = html.encode('utf-8')
        parser = etree.HTMLParser(encoding='utf-8')
    else:
        parser = etree.HTMLParser()

    try:
        tree = etree.parse(BytesIO(html), parser)
    except (ValueError, etree.XMLSyntaxError):
        return None
    return tree.getroot()


def findProviderURI(root):
    """Return the text of the first non-empty C{<URI>} element.

    @rtype: str or NoneType
    """
    # The HTML parser lower-cases element names.
    for element in root.iter('uri'):
        text = (element.text or '').strip()
        if text:
            return text
    return None


def findLinkHref(root, rel):
    """Return the C{href} of the first C{<link>} with C{rel} among its
    relations.

    Links written with C{rel} before C{href} take precedence over links
    written the other way around; in each group the first one in the
    document wins.

    @param rel: The relation, matched case-insensitively against the
        whitespace separated tokens of the C{rel} attribute.
    @type rel: str

    @rtype: str or NoneType
    """
    rel = rel.lower()
    rel_first = []
    href_first = []
    for link in root.iter('link'):
        names = link.keys()
        if 'rel' not in names or 'href' not in names:
            continue

        if rel not in (link.get('rel') or '').lower().split():
            continue

        href = (link.get('href') or '').strip()
        if not href:
            continue

        if names.index('rel') < names.index('href'):
            rel_first.append(href)
        else:
            href_first.append(href)

    for hrefs in (rel_first, href_first):
        if hrefs:
            return hrefs[0]
    return None

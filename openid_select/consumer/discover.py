# -*- test-case-name: openid_select.test.test_discover -*-
"""Discovery of the OpenID provider for a claimed identifier.

The identifier URL is fetched and the provider endpoint is read from
the first C{<URI>} element of the document.  Providers which require
the directed identity serve such a document instead of per-user
HTML pages.  The optional C{<link rel="openid2.local_id">} names the
identifier to present to the provider.

Results are cached in the store for L{DISCOVERY_LIFETIME} seconds.
"""
import logging
import time
from collections import namedtuple

from openid_select import fetchers
from openid_select.constants import DISCOVERY_LIFETIME, OPENID_1_1, OPENID_2_0
from openid_select.consumer import html_parse
from openid_select.consumer.errors import DiscoveryFailure

__all__ = ['DiscoveryRecord', 'Discoverer', 'DiscoveryFailure', 'parseDiscoveryDocument']

_LOGGER = logging.getLogger(__name__)

OPENID2_LOCAL_ID_REL = 'openid2.local_id'
OPENID1_SERVER_REL = 'openid.server'
OPENID1_DELEGATE_REL = 'openid.delegate'


class DiscoveryRecord(namedtuple('DiscoveryRecord', 'claimed_id real_id server_url version expires')):
    """Cached result of discovery.

    @ivar claimed_id: The identifier discovery was performed on, the cache key.
    @ivar real_id: The identifier to present to the provider.
    @ivar server_url: The provider endpoint URL.
    @ivar version: OpenID protocol version, C{1.1} or C{2.0}.
    @ivar expires: Unix timestamp after which the record must not be used.
    """
    __slots__ = ()


def findLocalID(root, version):
    """Return the local identifier declared in the document, if any.

    OpenID 2.0 documents declare it as C{openid2.local_id}, OpenID 1.x
    documents as C{openid.delegate}.
    """
    if version >= OPENID_2_0:
        return html_parse.findLinkHref(root, OPENID2_LOCAL_ID_REL)
    else:
        return html_parse.findLinkHref(root, OPENID1_DELEGATE_REL)


def parseDiscoveryDocument(html, legacy_html=False):
    """Find the provider endpoint in a discovery document.

    @param html: The fetched document
    @type html: bytes or str

    @param legacy_html: Also accept OpenID 1.x
        C{<link rel="openid.server">} documents.
    @type legacy_html: bool

    @return: (server_url, version, local_id); C{local_id} is C{None}
        when the document does not declare one.
    @rtype: Tuple[str, float, Optional[str]]

    @raises DiscoveryFailure: When no provider endpoint is found.
    """
    root = html_parse.parseHTML(html)
    if root is None:
        raise DiscoveryFailure('Could not parse the identifier document')

    server_url = html_parse.findProviderURI(root)
    if server_url is not None:
        version = OPENID_2_0
    elif legacy_html:
        server_url = html_parse.findLinkHref(root, OPENID1_SERVER_REL)
        version = OPENID_1_1

    if server_url is None:
        raise DiscoveryFailure('No OpenID provider endpoint found in the identifier document')

    return server_url, version, findLocalID(root, version)


class Discoverer(object):
    """Resolves claimed identifiers using the discovery cache of a store.

    @ivar store: Store keeping the discovery results
    @type store: C{L{OpenIDStore<openid_select.store.interface.OpenIDStore>}}

    @ivar lifetime: Seconds a fresh result stays in the cache
    @type lifetime: int

    @ivar legacy_html: Whether OpenID 1.x HTML documents are accepted
    @type legacy_html: bool
    """

    def __init__(self, store, lifetime=DISCOVERY_LIFETIME, legacy_html=False):
        self.store = store
        self.lifetime = lifetime
        self.legacy_html = legacy_html

    def discover(self, claimed_id):
        """Resolve the claimed identifier.

        The cache is consulted with exactly C{claimed_id}.  On a miss
        the identifier is fetched and the result is cached.  Nothing is
        cached when discovery fails.

        @param claimed_id: Normalized identifier URL
        @type claimed_id: str

        @rtype: DiscoveryRecord

        @raises DiscoveryFailure: When the provider can not be found.
        """
        record = self.store.getDiscoveryInfo(claimed_id)
        if record is not None:
            _LOGGER.debug('Using cached discovery result for %s', claimed_id)
            return record

        server_url, version, local_id = self._discoverHTML(claimed_id)
        if local_id is None:
            local_id = claimed_id

        record = DiscoveryRecord(claimed_id, local_id, server_url, version, int(time.time()) + self.lifetime)
        self.store.addDiscoveryInfo(record)
        _LOGGER.info('Discovered OpenID %s provider %s for %s', version, server_url, claimed_id)
        return record

    def _discoverHTML(self, claimed_id):
        try:
            response = fetchers.fetch(claimed_id)
        except fetchers.HTTPFetchingError as error:
            raise DiscoveryFailure('Error fetching %s: %s' % (claimed_id, error.why), why=error.why)

        if response.status != 200:
            raise DiscoveryFailure(
                'HTTP Response status from identity URL host is not 200. '
                'Got status %r' % (response.status,), response)

        if not isinstance(response.body, (bytes, str)):
            raise DiscoveryFailure('No document returned from %s' % (claimed_id,), response)

        try:
            return parseDiscoveryDocument(response.body, self.legacy_html)
        except DiscoveryFailure as failure:
            failure.http_response = response
            raise

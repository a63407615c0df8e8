"""Tests for `openid_select.consumer.discover` module."""
import unittest

from mock import patch
from testfixtures import LogCapture

from openid_select.consumer import discover
from openid_select.consumer.discover import DiscoveryFailure, DiscoveryRecord, Discoverer, parseDiscoveryDocument
from openid_select.fetchers import HTTPResponse
from openid_select.store.memstore import MemoryStore

from .utils import ErrorRaisingFetcher, FetcherMixin, MockFetcher, discoveryDocument

CLAIMED_ID = 'http://user.example/'
SERVER_URL = 'http://provider.example/ep'


class TestParseDiscoveryDocument(unittest.TestCase):
    """Test `parseDiscoveryDocument` function."""

    def test_uri(self):
        self.assertEqual(parseDiscoveryDocument(b'<URI>http://provider.example/ep</URI>'),
                         ('http://provider.example/ep', 2.0, None))

    def test_local_id(self):
        html = discoveryDocument(SERVER_URL, 'http://real.example/u')
        self.assertEqual(parseDiscoveryDocument(html), (SERVER_URL, 2.0, 'http://real.example/u'))

    def test_local_id_reordered(self):
        html = discoveryDocument(SERVER_URL, 'http://real.example/u', rel_first=False)
        self.assertEqual(parseDiscoveryDocument(html), (SERVER_URL, 2.0, 'http://real.example/u'))

    def test_delegate_ignored_for_2_0(self):
        html = b'<link rel="openid.delegate" href="http://real.example/u"><URI>http://provider.example/ep</URI>'
        self.assertEqual(parseDiscoveryDocument(html), (SERVER_URL, 2.0, None))

    def test_no_uri(self):
        html = b'<html><head><title>A boring document</title></head></html>'
        with self.assertRaisesRegex(DiscoveryFailure, 'No OpenID provider endpoint found'):
            parseDiscoveryDocument(html)

    def test_empty(self):
        self.assertRaises(DiscoveryFailure, parseDiscoveryDocument, b'')

    def test_openid1_link_without_legacy(self):
        html = b'<html><head><link rel="openid.server" href="http://provider.example/ep"></head></html>'
        self.assertRaises(DiscoveryFailure, parseDiscoveryDocument, html)

    def test_legacy(self):
        html = (b'<html><head><link rel="openid.server" href="http://provider.example/ep">'
                b'<link rel="openid.delegate" href="http://real.example/u">'
                b'<link rel="openid2.local_id" href="http://other.example/u"></head></html>')
        self.assertEqual(parseDiscoveryDocument(html, legacy_html=True), (SERVER_URL, 1.1, 'http://real.example/u'))

    def test_legacy_prefers_uri(self):
        html = (b'<html><head><link rel="openid.server" href="http://old.example/ep"></head>'
                b'<body><URI>http://provider.example/ep</URI></body></html>')
        self.assertEqual(parseDiscoveryDocument(html, legacy_html=True), (SERVER_URL, 2.0, None))


class TestFindLocalID(unittest.TestCase):
    """Test `findLocalID` function."""

    html = (b'<html><head><link rel="openid.delegate" href="http://delegate.example/">'
            b'<link rel="openid2.local_id" href="http://local.example/"></head></html>')

    def test_openid2(self):
        root = discover.html_parse.parseHTML(self.html)
        self.assertEqual(discover.findLocalID(root, 2.0), 'http://local.example/')

    def test_openid1(self):
        root = discover.html_parse.parseHTML(self.html)
        self.assertEqual(discover.findLocalID(root, 1.1), 'http://delegate.example/')


class TestDiscoverer(FetcherMixin, unittest.TestCase):
    """Test `Discoverer` class."""

    def setUp(self):
        self.store = MemoryStore()
        self.discoverer = Discoverer(self.store)
        self.fetcher = self.installFetcher(MockFetcher({
            CLAIMED_ID: HTTPResponse(CLAIMED_ID, 200, {}, discoveryDocument(SERVER_URL)),
        }))

    def test_discover(self):
        with patch('time.time', return_value=1000):
            record = self.discoverer.discover(CLAIMED_ID)
        self.assertEqual(record, DiscoveryRecord(CLAIMED_ID, CLAIMED_ID, SERVER_URL, 2.0, 4600))
        self.assertEqual(self.fetcher.fetches, [(CLAIMED_ID, None, None)])

    def test_local_id(self):
        self.fetcher.responses[CLAIMED_ID] = HTTPResponse(
            CLAIMED_ID, 200, {}, discoveryDocument(SERVER_URL, 'http://real.example/u', rel_first=False))
        record = self.discoverer.discover(CLAIMED_ID)
        self.assertEqual(record.real_id, 'http://real.example/u')
        self.assertEqual(record.claimed_id, CLAIMED_ID)

    def test_cached(self):
        with patch('time.time', return_value=1000):
            first = self.discoverer.discover(CLAIMED_ID)
        with patch('time.time', return_value=4599):
            with LogCapture() as logbook:
                second = self.discoverer.discover(CLAIMED_ID)
        self.assertEqual(second, first)
        self.assertEqual(len(self.fetcher.fetches), 1)
        logbook.check(('openid_select.consumer.discover', 'DEBUG',
                       'Using cached discovery result for http://user.example/'))

    def test_expired(self):
        with patch('time.time', return_value=1000):
            self.discoverer.discover(CLAIMED_ID)
        with patch('time.time', return_value=4600):
            record = self.discoverer.discover(CLAIMED_ID)
        self.assertEqual(record.expires, 8200)
        self.assertEqual(len(self.fetcher.fetches), 2)

    def test_cache_keyed_by_claimed_id(self):
        other = 'http://other.example/'
        self.store.addDiscoveryInfo(DiscoveryRecord(other, CLAIMED_ID, SERVER_URL, 2.0, 2 ** 40))
        self.discoverer.discover(CLAIMED_ID)
        self.assertEqual(len(self.fetcher.fetches), 1)

    def test_cache_hit_returns_stored_record(self):
        record = DiscoveryRecord(CLAIMED_ID, 'http://real.example/', 'http://cached.example/', 1.1, 2 ** 40)
        self.store.addDiscoveryInfo(record)
        self.assertIs(self.discoverer.discover(CLAIMED_ID), record)
        self.assertEqual(self.fetcher.fetches, [])

    def test_lifetime(self):
        discoverer = Discoverer(self.store, lifetime=60)
        with patch('time.time', return_value=1000):
            self.assertEqual(discoverer.discover(CLAIMED_ID).expires, 1060)

    def test_not_found(self):
        with self.assertRaisesRegex(DiscoveryFailure, 'Got status 404') as catch:
            self.discoverer.discover('http://missing.example/')
        self.assertEqual(catch.exception.http_response.status, 404)
        self.assertIsNone(self.store.getDiscoveryInfo('http://missing.example/'))

    def test_no_body(self):
        self.fetcher.responses[CLAIMED_ID] = HTTPResponse(CLAIMED_ID, 200, {}, None)
        self.assertRaises(DiscoveryFailure, self.discoverer.discover, CLAIMED_ID)
        self.assertIsNone(self.store.getDiscoveryInfo(CLAIMED_ID))

    def test_no_uri(self):
        self.fetcher.responses[CLAIMED_ID] = HTTPResponse(
            CLAIMED_ID, 200, {}, b'<html><head><title>No OpenID</title></head></html>')
        with self.assertRaises(DiscoveryFailure) as catch:
            self.discoverer.discover(CLAIMED_ID)
        self.assertEqual(catch.exception.http_response.status, 200)
        self.assertIsNone(self.store.getDiscoveryInfo(CLAIMED_ID))

    def test_fetch_error(self):
        self.installFetcher(ErrorRaisingFetcher(ValueError('Name or service not known')))
        with self.assertRaisesRegex(DiscoveryFailure, 'Name or service not known') as catch:
            self.discoverer.discover(CLAIMED_ID)
        self.assertIsInstance(catch.exception.why, ValueError)
        self.assertIsNone(self.store.getDiscoveryInfo(CLAIMED_ID))

    def test_unwrapped_fetch_error(self):
        self.installFetcher(ErrorRaisingFetcher(RuntimeError()), wrap_exceptions=False)
        self.assertRaises(RuntimeError, self.discoverer.discover, CLAIMED_ID)

    def test_legacy(self):
        self.fetcher.responses[CLAIMED_ID] = HTTPResponse(
            CLAIMED_ID, 200, {}, b'<link rel="openid.server" href="http://provider.example/ep">')
        discoverer = Discoverer(self.store, legacy_html=True)
        record = discoverer.discover(CLAIMED_ID)
        self.assertEqual((record.server_url, record.version, record.real_id), (SERVER_URL, 1.1, CLAIMED_ID))

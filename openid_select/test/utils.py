"""Test utilities."""
from openid_select import fetchers
from openid_select.fetchers import HTTPResponse


class MockFetcher(object):
    """Fetcher returning prepared responses keyed by URL and recording
    every fetch."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.fetches = []

    def fetch(self, url, body=None, headers=None):
        self.fetches.append((url, body, headers))
        try:
            return self.responses[url]
        except KeyError:
            return HTTPResponse(url, 404, {}, b'Not found')


class ErrorRaisingFetcher(object):
    """Just raise an exception when fetch is called"""

    def __init__(self, thing_to_raise):
        self.thing_to_raise = thing_to_raise

    def fetch(self, url, body=None, headers=None):
        raise self.thing_to_raise


class FetcherMixin(object):
    """Mixin installing a default fetcher for the duration of a test."""

    def installFetcher(self, fetcher, wrap_exceptions=True):
        fetchers.setDefaultFetcher(fetcher, wrap_exceptions)
        self.addCleanup(fetchers.setDefaultFetcher, None)
        return fetcher


def discoveryDocument(server_url, local_id=None, rel_first=True):
    """Return an XRDS-like document as providers requiring the directed
    identity serve it."""
    link = ''
    if local_id is not None:
        if rel_first:
            link = '<link rel="openid2.local_id" href="%s"/>' % local_id
        else:
            link = '<link href="%s" rel="openid2.local_id"/>' % local_id
    return ('<html><head>%s</head><body>'
            '<xrds><XRD><Service><Type>http://specs.openid.net/auth/2.0/server</Type>'
            '<URI>%s</URI></Service></XRD></xrds></body></html>' % (link, server_url)).encode('utf-8')

"""HTTP transport used for discovery and association requests.

All the requests of the library go through L{fetch} which delegates to
the default fetcher.  By default it is a L{RequestsFetcher} whose
exceptions are wrapped into L{HTTPFetchingError}.  Applications can
install their own fetcher with L{setDefaultFetcher}.
"""
import sys

import requests

import openid_select

__all__ = ['fetch', 'getDefaultFetcher', 'setDefaultFetcher', 'HTTPResponse',
           'HTTPFetcher', 'createHTTPFetcher', 'HTTPFetchingError',
           'RequestsFetcher']

USER_AGENT = "python-openid-select/%s (%s)" % (openid_select.__version__, sys.platform)
# Longer responses are truncated.
MAX_RESPONSE_KB = 1024
DEFAULT_TIMEOUT = 20  # seconds

# The fetcher used by fetch(), created on first use.
_default_fetcher = None


def fetch(url, body=None, headers=None):
    """Perform the request with the default fetcher.

    @raises HTTPFetchingError: On transport errors, unless the default
        fetcher was installed unwrapped.
    """
    return getDefaultFetcher().fetch(url, body, headers)


def createHTTPFetcher():
    """Create the fetcher used when none was installed."""
    return RequestsFetcher()


def getDefaultFetcher():
    """Return the default fetcher, creating it if none was installed.

    @rtype: HTTPFetcher
    """
    if _default_fetcher is None:
        setDefaultFetcher(createHTTPFetcher())
    return _default_fetcher


def setDefaultFetcher(fetcher, wrap_exceptions=True):
    """Install the default fetcher.

    @param fetcher: The fetcher, C{None} restores the default on the
        next use.
    @type fetcher: HTTPFetcher or NoneType

    @param wrap_exceptions: Wrap the errors of the fetcher into
        L{HTTPFetchingError}, which the consumer reports as discovery
        or association failures.  Unwrapped errors propagate as they
        are, which helps debugging.
    @type wrap_exceptions: bool
    """
    global _default_fetcher
    if fetcher is not None and wrap_exceptions:
        fetcher = ExceptionWrappingFetcher(fetcher)
    _default_fetcher = fetcher


class HTTPResponse(object):
    """Result of a request.

    @ivar final_url: URL the response came from, after redirects
    @ivar status: HTTP status code
    @ivar headers: Response headers
    @ivar body: Response content
    @type body: bytes
    """

    def __init__(self, final_url=None, status=None, headers=None, body=None):
        self.final_url = final_url
        self.status = status
        self.headers = headers
        self.body = body

    def __repr__(self):
        return "<%s %s from %s>" % (self.__class__.__name__, self.status, self.final_url)


class HTTPFetcher(object):
    """Interface of fetchers."""

    def fetch(self, url, body=None, headers=None):
        """Request the URL, POST when a body is given, GET otherwise.
        Redirects are followed.

        @type url: str
        @type body: bytes or NoneType
        @type headers: Dict[str, str] or NoneType

        @return: The response.  Error statuses are returned, not raised.
        @rtype: L{HTTPResponse}

        @raise Exception: On transport errors; the type depends on the
            implementation.
        """
        raise NotImplementedError


class HTTPFetchingError(Exception):
    """A transport error of the wrapped fetcher.

    @ivar why: The underlying exception
    """

    def __init__(self, why=None):
        Exception.__init__(self, why)
        self.why = why


class ExceptionWrappingFetcher(HTTPFetcher):
    """Wraps any exception of the fetcher into L{HTTPFetchingError}."""

    def __init__(self, fetcher):
        self.fetcher = fetcher

    def fetch(self, *args, **kwargs):
        try:
            return self.fetcher.fetch(*args, **kwargs)
        except HTTPFetchingError:
            raise
        except Exception as why:
            raise HTTPFetchingError(why=why)


class RequestsFetcher(HTTPFetcher):
    """Fetcher built on a C{requests} session.

    @ivar timeout: Seconds to wait for the server
    @ivar session: The C{requests.Session} the requests are sent with;
        it may carry proxies, certificates or adapters.
    """

    def __init__(self, timeout=DEFAULT_TIMEOUT, session=None):
        self.timeout = timeout
        if session is None:
            session = requests.Session()
        self.session = session

    def fetch(self, url, body=None, headers=None):
        """
        @raises ValueError: If the URL is not HTTP or HTTPS
        @raises requests.RequestException: On transport errors

        @see: C{L{HTTPFetcher.fetch}}
        """
        if not url.startswith(('http://', 'https://')):
            raise ValueError('Bad URL scheme: %r' % (url,))

        method = 'POST' if body else 'GET'
        headers = dict(headers or {})
        headers.setdefault('User-Agent', '%s python-requests/%s' % (USER_AGENT, requests.__version__))

        response = self.session.request(method, url, data=body, headers=headers, timeout=self.timeout, stream=True)
        try:
            # Only the allowed amount is read from the connection.
            content = response.raw.read(MAX_RESPONSE_KB * 1024, decode_content=True)
        finally:
            response.close()
        return HTTPResponse(response.url, response.status_code, response.headers, content)

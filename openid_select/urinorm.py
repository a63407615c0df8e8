"""Normalization of identifiers typed in by users and of HTTP(S) URLs."""
import string
from urllib.parse import parse_qsl, quote, unquote, urldefrag, urlencode, urlsplit, urlunsplit

__all__ = ['urinorm', 'normalizeIdentifier']

SUB_DELIMS = "!$&'()*+,;="
# Characters allowed in a normalized URI, RFC 3986 section 2.
ALLOWED = frozenset(string.ascii_letters + string.digits + '-._~' + ':/?#[]@' + SUB_DELIMS + '%')

DEFAULT_PORTS = {'http': 80, 'https': 443}

# Global context symbols which start an XRI identifier.
XRI_GCS = '=@+$!('


def remove_dot_segments(path):
    """Resolve C{.} and C{..} segments of the path, RFC 3986 section 5.2.4."""
    absolute = path.startswith('/')
    segments = path.split('/')[1:] if absolute else path.split('/')
    output = []
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment in ('.', '..'):
            if segment == '..' and output:
                output.pop()
            if last:
                # The path keeps its trailing slash.
                output.append('')
        else:
            output.append(segment)
    return ('/' if absolute else '') + '/'.join(output)


def _checkCharacters(value, part):
    if not ALLOWED.issuperset(value):
        raise ValueError('Illegal characters in URI {}: {}'.format(part, value))


def _normalizeNetloc(parts):
    if not parts.hostname:
        raise ValueError('Not an absolute URI: {!r}'.format(parts.geturl()))
    try:
        host = unquote(parts.hostname).encode('idna').decode('ascii')
    except UnicodeError as error:
        raise ValueError('Invalid hostname {!r}: {}'.format(parts.hostname, error))
    _checkCharacters(host, 'hostname')

    try:
        port = parts.port
    except ValueError as error:
        raise ValueError('Invalid port in {!r}: {}'.format(parts.netloc, error))
    if port is not None and port != DEFAULT_PORTS[parts.scheme.lower()]:
        host = '%s:%d' % (host, port)

    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo += ':' + parts.password
        _checkCharacters(userinfo, 'userinfo')
        host = userinfo + '@' + host
    return host


def urinorm(uri):
    """Return the URI normalized as described in RFC 3986, section 6.
    Only absolute HTTP and HTTPS URIs are accepted.

    @type uri: str
    @rtype: str
    @raise ValueError: If the URI is not valid.
    """
    parts = urlsplit(uri)
    scheme = parts.scheme.lower()
    if scheme not in DEFAULT_PORTS:
        raise ValueError('Not an absolute HTTP or HTTPS URI: {!r}'.format(uri))

    netloc = _normalizeNetloc(parts)

    # Re-quoting decodes unreserved characters and upper-cases the escapes.
    path = remove_dot_segments(quote(unquote(parts.path), safe='/' + SUB_DELIMS)) or '/'
    _checkCharacters(path, 'path')

    query = urlencode(parse_qsl(parts.query))
    _checkCharacters(query, 'query')

    fragment = unquote(parts.fragment)
    _checkCharacters(fragment, 'fragment')

    return urlunsplit((scheme, netloc, path, query, fragment))


def normalizeIdentifier(identifier):
    """Normalize an identifier typed in by the user into the URL on
    which discovery is performed.

    Surrounding whitespace is removed, C{http://} is assumed when no
    scheme is given and the fragment is dropped.

    @param identifier: The identifier as supplied by the user.
    @type identifier: str

    @return: Normalized identifier URL
    @rtype: str

    @raise ValueError: If the identifier is empty, an XRI, or not a
        valid HTTP(S) URL.
    """
    if identifier is None:
        raise ValueError('No identifier given')

    identifier = identifier.strip()
    if identifier.lower().startswith('xri://'):
        identifier = identifier[6:]

    if not identifier:
        raise ValueError('Empty identifier')

    if identifier[0] in XRI_GCS:
        raise ValueError('XRI identifiers are not supported: {!r}'.format(identifier))

    if '://' not in identifier:
        identifier = 'http://' + identifier

    identifier = urldefrag(identifier)[0]
    return urinorm(identifier)

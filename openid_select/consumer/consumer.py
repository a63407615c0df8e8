# -*- test-case-name: openid_select.test.test_consumer -*-
"""
This module documents the main interface with the consumer library.

OVERVIEW
========

    The authentication request is made in these steps, all performed
    by L{Consumer.checkId}:

        1. The identifier entered by the user is normalized.

        2. The provider endpoint is discovered, or taken from the
           discovery cache.

        3. An association with the provider is established, if
           possible.  Without one the request is made in stateless
           ("dumb") mode.

        4. The request arguments are assembled.  The provider always
           receives the directed identity placeholder as both the
           identity and the claimed identifier, so the user picks the
           identity at the provider.  The placeholder is remembered in
           the user's session.

        5. The extensions add their arguments.

        6. The user's browser is sent to the provider.

    Any failure raises a subclass of L{CheckIdFailure} and nothing is
    sent to the browser.

USAGE
=====

    A consumer is created for every HTTP request::

        consumer = Consumer(store, session=request.session, self_url=request.build_absolute_uri())
        response = Response()
        try:
            consumer.checkIdSetup(identifier, '/openid/finish/', response=response)
        except CheckIdFailure as error:
            ...

    C{response} now holds either the redirect or a self-submitting
    form.
"""
import logging
import posixpath
from urllib.parse import urljoin, urlsplit, urlunsplit

from openid_select import extension, redirect, urinorm
from openid_select import session as session_module
from openid_select.association import StoreAssociationManager
from openid_select.constants import IDENTIFIER_SELECT, OPENID2_NS, OPENID_2_0
from openid_select.consumer.discover import Discoverer
from openid_select.consumer.errors import (AssociationFailure, CheckIdFailure, DiscoveryFailure, ExtensionFailure,
                                           NormalizationFailure)

__all__ = ['Consumer', 'CheckIdFailure', 'NormalizationFailure', 'DiscoveryFailure', 'AssociationFailure',
           'ExtensionFailure', 'START', 'NORMALIZED', 'DISCOVERED', 'ASSOCIATED', 'PARAMS_BUILT', 'STASHED',
           'EXTENSIONS_APPLIED', 'REDIRECTED', 'FAILED']

_LOGGER = logging.getLogger(__name__)

START = 'start'
NORMALIZED = 'normalized'
DISCOVERED = 'discovered'
ASSOCIATED = 'associated'
PARAMS_BUILT = 'params_built'
STASHED = 'stashed'
EXTENSIONS_APPLIED = 'extensions_applied'
REDIRECTED = 'redirected'
FAILED = 'failed'


def directoryURL(url):
    """Return the URL without query and fragment, cut to its directory
    unless it already ends with a slash.

    C{http://host/path/page} becomes C{http://host/path}, C{http://host}
    becomes C{http://host/}.
    """
    scheme, netloc, path, _, _ = urlsplit(url)
    url = urlunsplit((scheme, netloc, path or '/', '', ''))
    if not url.endswith('/'):
        url = posixpath.dirname(url)
    return url


def _headersNotSent():
    return False


def checkURL(url, name):
    """Reject URLs with control characters, they can be sent neither
    in a query nor in a form.

    @raises CheckIdFailure: If the URL contains a control character
    """
    if any(ord(char) < 0x20 or ord(char) == 0x7f for char in url):
        raise CheckIdFailure('Invalid %s URL: %r' % (name, url))


class Consumer(object):
    """A consumer which sends the directed identity placeholder to the
    provider.

    @ivar store: Store of associations and discovery results
    @type store: C{L{OpenIDStore<openid_select.store.interface.OpenIDStore>}}

    @ivar discoverer: Resolver of claimed identifiers
    @type discoverer: C{L{Discoverer<openid_select.consumer.discover.Discoverer>}}

    @ivar association_manager: The association engine
    @type association_manager: C{L{AssociationManager<openid_select.association.AssociationManager>}}

    @ivar session_stashes: Session capabilities, in order of preference
    @type session_stashes: List[C{L{SessionStash<openid_select.session.SessionStash>}}]

    @ivar self_url: Absolute URL of the current request
    @type self_url: str

    @ivar state: The last state reached by L{checkId}
    @ivar error: Message of the last failure, empty if there was none
    """

    def __init__(self, store, association_manager=None, session=None, session_stashes=None, self_url=None,
                 discoverer=None, container=None, session_factory=None, headers_sent=None):
        """Initialize a Consumer instance.

        @param store: an object that implements the interface in
            C{L{openid_select.store.interface.OpenIDStore}}.

        @param association_manager: The association engine, by default
            a C{L{StoreAssociationManager<openid_select.association.StoreAssociationManager>}}
            on C{store}.

        @param session: A dict-like session of the web framework.  It is
            used when C{session_stashes} are not given.

        @param session_stashes: Session capabilities tried in order
            when the requested identity is remembered.  By default the
            C{container}, the C{session} and a container created by
            C{session_factory}, in this order.

        @param container: Session container dedicated to this library,
            if one is configured.

        @param session_factory: Callable creating a new session
            container when neither C{container} nor C{session} is
            available.

        @param headers_sent: Callable returning whether the response was
            already started, which rules out a new container.  Defaults
            to never started.

        @param self_url: Absolute URL of the current request.  Relative
            return URLs are resolved against it and the realm is
            derived from it.

        @param discoverer: Resolver of claimed identifiers, by default a
            C{L{Discoverer<openid_select.consumer.discover.Discoverer>}}
            on C{store}.
        """
        self.store = store
        if association_manager is None:
            association_manager = StoreAssociationManager(store)
        self.association_manager = association_manager
        if discoverer is None:
            discoverer = Discoverer(store)
        self.discoverer = discoverer
        if session_stashes is None:
            session_stashes = [session_module.ContainerStash(container), session_module.NativeSessionStash(session)]
            if session_factory is not None:
                lazy = session_module.LazySessionStash(session_factory, headers_sent or _headersNotSent)
                session_stashes.append(lazy)
        self.session_stashes = list(session_stashes)
        self.self_url = self_url
        self.state = START
        self.error = ''

    def getError(self):
        return self.error

    def checkIdSetup(self, identifier, return_to=None, root=None, extensions=None, response=None):
        """Start an interactive authentication.  See L{checkId}."""
        return self.checkId(False, identifier, return_to, root, extensions, response)

    def checkIdImmediate(self, identifier, return_to=None, root=None, extensions=None, response=None):
        """Start an authentication without interaction with the user.
        See L{checkId}."""
        return self.checkId(True, identifier, return_to, root, extensions, response)

    def checkId(self, immediate, identifier, return_to=None, root=None, extensions=None, response=None):
        """Send the user to the provider to authenticate.

        @param immediate: Whether the provider may interact with the user
        @type immediate: bool

        @param identifier: The identifier given by the user
        @type identifier: str

        @param return_to: URL the provider sends the user back to,
            relative URLs are resolved against L{self_url}.  Defaults to
            L{self_url}.
        @type return_to: str or NoneType

        @param root: The realm (trust root) identifying this consumer.
            Derived from L{self_url} when empty.
        @type root: str or NoneType

        @param extensions: Extensions which add arguments to the request
        @type extensions: Extension or Iterable[Extension] or NoneType

        @param response: Response the redirect is written to
        @type response: C{L{Response<openid_select.redirect.Response>}} or NoneType

        @return: The request sent to the provider
        @rtype: C{L{Redirect<openid_select.redirect.Redirect>}}

        @raises CheckIdFailure: When the request can not be made
        """
        self.state = START
        self.error = ''
        try:
            return self._checkId(immediate, identifier, return_to, root, extensions, response)
        except CheckIdFailure as failure:
            self.state = FAILED
            self.error = str(failure)
            _LOGGER.warning('Authentication request for %r failed: %s', identifier, failure)
            raise

    def _checkId(self, immediate, identifier, return_to, root, extensions, response):
        try:
            claimed_id = urinorm.normalizeIdentifier(identifier)
        except ValueError as why:
            raise NormalizationFailure('Normalisation failed: %s' % (why,), why)
        self.state = NORMALIZED

        try:
            discovered = self.discoverer.discover(claimed_id)
        except DiscoveryFailure as why:
            raise DiscoveryFailure('Discovery failed: %s' % (why,), why.http_response, why)
        self.state = DISCOVERED

        server_url = discovered.server_url
        version = discovered.version
        if not self.association_manager.associate(server_url, version):
            raise AssociationFailure('Association failed: no association established with %s' % (server_url,))

        assoc = self.association_manager.getAssociation(server_url)
        if assoc is None:
            _LOGGER.debug('No association with %s, using stateless mode', server_url)
        self.state = ASSOCIATED

        params = {}
        if version >= OPENID_2_0:
            params['openid.ns'] = OPENID2_NS

        if immediate:
            params['openid.mode'] = 'checkid_immediate'
        else:
            params['openid.mode'] = 'checkid_setup'

        params['openid.identity'] = IDENTIFIER_SELECT
        params['openid.claimed_id'] = IDENTIFIER_SELECT

        # Both URLs are checked before anything is stashed.
        return_to = self.absoluteURL(return_to)
        if not root:
            root = directoryURL(self.getSelfURL())
        checkURL(return_to, 'return')
        checkURL(root, 'realm')
        self.state = PARAMS_BUILT

        if version <= OPENID_2_0:
            self._stashIdentity()
        self.state = STASHED

        if assoc is not None:
            params['openid.assoc_handle'] = assoc.handle

        params['openid.return_to'] = return_to
        if version >= OPENID_2_0:
            params['openid.realm'] = root
        else:
            params['openid.trust_root'] = root

        if not extension.forAll(extensions, 'prepareRequest', params):
            raise ExtensionFailure('An extension failed to prepare the request')
        self.state = EXTENSIONS_APPLIED

        request = redirect.redirect(server_url, params, response)
        request.claimed_id = claimed_id
        request.real_id = discovered.real_id
        self.state = REDIRECTED
        return request

    def _stashIdentity(self):
        values = {'identity': IDENTIFIER_SELECT, 'claimed_id': IDENTIFIER_SELECT}
        stash = session_module.stashAll(self.session_stashes, values)
        if isinstance(stash, session_module.LazySessionStash):
            # The new container is the configured session from now on.
            self.session_stashes.insert(0, session_module.ContainerStash(stash.container))

    def getSelfURL(self):
        if not self.self_url:
            raise ValueError('URL of the current request is not known')
        return self.self_url

    def absoluteURL(self, url):
        """Resolve the URL against the URL of the current request."""
        if not url:
            return self.getSelfURL()
        if urlsplit(url).scheme:
            return url
        return urljoin(self.getSelfURL(), url)

"""Session capabilities used to remember the requested identity.

The identity sent in the authentication request is stashed in the
user's session, so the response handler can recognize it.  A consumer
is given an ordered list of capabilities; the first one which is
available stores the values and the rest are not consulted.  When none
is available the values are not stored.
"""
import logging

__all__ = ['SessionStash', 'ContainerStash', 'NativeSessionStash', 'LazySessionStash', 'stashAll']

_LOGGER = logging.getLogger(__name__)

# Name of the session entry used by this library.
SESSION_NAMESPACE = 'openid_select'


class SessionStash(object):
    """Interface of a session capability."""

    def stash(self, values):
        """Store the values in the session.

        @param values: Names and values to store
        @type values: Dict[str, str]

        @return: Whether the capability was available and the values
            were stored.
        @rtype: bool
        """
        raise NotImplementedError


class ContainerStash(SessionStash):
    """Store the values in an already configured, dict-like session
    container dedicated to this library."""

    def __init__(self, container):
        self.container = container

    def stash(self, values):
        if self.container is None:
            return False
        self.container.update(values)
        return True


class NativeSessionStash(SessionStash):
    """Store the values under one key of the framework's session,
    e.g. C{request.session} in Django.

    @ivar session: The session mapping or C{None} when sessions are not
        active for the current request.
    """

    def __init__(self, session, key=SESSION_NAMESPACE):
        self.session = session
        self.key = key

    def stash(self, values):
        if self.session is None:
            return False
        self.session[self.key] = dict(values)
        return True


class LazySessionStash(SessionStash):
    """Create a new session container, unless the response has been
    started already.

    @ivar factory: Callable returning a new dict-like container
    @ivar headers_sent: Callable returning whether response output
        was already emitted
    @ivar container: The container created by the last successful
        L{stash}, C{None} before that
    """

    def __init__(self, factory, headers_sent):
        self.factory = factory
        self.headers_sent = headers_sent
        self.container = None

    def stash(self, values):
        if self.headers_sent():
            return False
        self.container = self.factory()
        self.container.update(values)
        return True


def stashAll(stashes, values):
    """Stash the values through the first available capability.

    @type stashes: Iterable[SessionStash]

    @return: The capability that stored the values or C{None}.
    @rtype: SessionStash or NoneType
    """
    for stash in stashes:
        if stash.stash(values):
            return stash
    _LOGGER.debug('No session available, requested identity not stored')
    return None

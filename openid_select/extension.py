"""Base of the authentication request extensions."""
import logging

__all__ = ['Extension', 'forAll']

_LOGGER = logging.getLogger(__name__)


class Extension(object):
    """An interface for OpenID extensions.

    @ivar ns_uri: The namespace of this extension's arguments
    """
    ns_uri = None

    def prepareRequest(self, params):
        """Add the arguments of this extension to the authentication
        request.

        @param params: The request arguments, modified in place
        @type params: Dict[str, str]

        @return: C{False} if the request can not be prepared
        @rtype: bool
        """
        return True


def forAll(extensions, func_name, params):
    """Call a hook on each of the extensions in order.

    @param extensions: An extension, a sequence of them or C{None}
    @type extensions: Extension or Iterable[Extension] or NoneType

    @param func_name: Name of the hook, e.g. C{'prepareRequest'}
    @type func_name: str

    @param params: Argument passed to each hook

    @return: C{False} as soon as a hook fails or an item is not an
        extension, C{True} otherwise.
    @rtype: bool
    """
    if extensions is None:
        return True

    if isinstance(extensions, Extension):
        extensions = [extensions]

    for extension in extensions:
        if not isinstance(extension, Extension):
            _LOGGER.warning('Not an extension: %r', extension)
            return False
        if not getattr(extension, func_name)(params):
            _LOGGER.info('Extension %r failed in %s', extension, func_name)
            return False
    return True

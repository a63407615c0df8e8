"""Exceptions raised when an authentication request can not be made."""

__all__ = ['CheckIdFailure', 'NormalizationFailure', 'DiscoveryFailure', 'AssociationFailure',
           'ExtensionFailure']


class CheckIdFailure(Exception):
    """Base class for failures of the authentication request.

    @ivar why: The underlying cause, if any
    """

    def __init__(self, message, why=None):
        Exception.__init__(self, message)
        self.why = why


class NormalizationFailure(CheckIdFailure):
    """The identifier supplied by the user is not usable."""


class DiscoveryFailure(CheckIdFailure):
    """A failure to discover an OpenID provider for an identifier.

    @ivar http_response: The HTTP response from the identifier, if
        there was one
    @type http_response: C{L{HTTPResponse<openid_select.fetchers.HTTPResponse>}}
        or NoneType
    """

    def __init__(self, message, http_response=None, why=None):
        CheckIdFailure.__init__(self, message, why)
        self.http_response = http_response


class AssociationFailure(CheckIdFailure):
    """The association handshake with the provider failed."""


class ExtensionFailure(CheckIdFailure):
    """An extension refused to prepare the request."""

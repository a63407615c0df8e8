# -*- test-case-name: openid_select.test.test_association -*-
"""
This module contains code for dealing with associations between
consumers and providers. Associations contain a shared secret and a
handle which the provider uses to sign its positive assertions.

An association is established with the C{L{AssociationManager}}
before the authentication request is built.  A missing association is
not an error, the request is then made in stateless ("dumb") mode and
the provider response has to be verified directly with the provider.
"""
import logging
import time
from urllib.parse import urlencode

from openid_select import fetchers, kvform, oidutil
from openid_select.constants import OPENID2_NS, OPENID_2_0

__all__ = [
    'Association',
    'AssociationManager',
    'DumbAssociationManager',
    'StoreAssociationManager',
]

_LOGGER = logging.getLogger(__name__)

# Secret sizes by MAC function.
SECRET_SIZES = {
    'HMAC-SHA1': 20,
    'HMAC-SHA256': 32,
}


def getSecretSize(assoc_type):
    try:
        return SECRET_SIZES[assoc_type]
    except KeyError:
        raise ValueError('Unsupported association type: %r' % (assoc_type,))


class Association(object):
    """
    This class represents an association between a provider and a
    consumer.  Stores have to keep the values of the C{L{handle}},
    C{L{secret}}, C{L{issued}}, C{L{lifetime}}, and C{L{assoc_type}}
    instance variables.

    @ivar handle: This is the handle the provider gave this association.
    @type handle: str

    @ivar secret: This is the shared secret the provider generated for
        this association.
    @type secret: bytes

    @ivar issued: This is the time this association was issued, in
        seconds since the epoch.
    @type issued: int

    @ivar lifetime: This is the amount of time this association is
        good for, measured in seconds since the association was
        issued.
    @type lifetime: int

    @ivar assoc_type: The MAC function of the association,
        C{'HMAC-SHA1'} or C{'HMAC-SHA256'}.
    @type assoc_type: str
    """

    @classmethod
    def fromExpiresIn(cls, expires_in, handle, secret, assoc_type):
        """Create an association issued now which expires in
        C{expires_in} seconds."""
        issued = int(time.time())
        return cls(handle, secret, issued, expires_in, assoc_type)

    def __init__(self, handle, secret, issued, lifetime, assoc_type):
        getSecretSize(assoc_type)
        self.handle = handle
        self.secret = secret
        self.issued = issued
        self.lifetime = lifetime
        self.assoc_type = assoc_type

    @property
    def expiresIn(self):
        """Number of seconds this association is still valid for, or
        0 if it has already expired."""
        return max(0, self.issued + self.lifetime - int(time.time()))

    def __eq__(self, other):
        return type(self) == type(other) and self.__dict__ == other.__dict__

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return '<%s.%s %s %s>' % (self.__class__.__module__, self.__class__.__name__, self.assoc_type, self.handle)


class AssociationManager(object):
    """Interface of the association engine used by the consumer."""

    def associate(self, server_url, version):
        """Make sure an association with the provider is established,
        if one can be established at all.

        @param server_url: The provider endpoint URL
        @type server_url: str

        @param version: The OpenID protocol version of the endpoint
        @type version: float

        @return: C{False} if the association handshake failed.  Running
            without an association is not a failure.
        @rtype: bool
        """
        raise NotImplementedError

    def getAssociation(self, server_url):
        """Return a live association for the endpoint or C{None}.

        @rtype: Association or NoneType
        """
        raise NotImplementedError


class DumbAssociationManager(AssociationManager):
    """Association manager which never associates, all requests are
    made in stateless mode."""

    def associate(self, server_url, version):
        return True

    def getAssociation(self, server_url):
        return None


class StoreAssociationManager(AssociationManager):
    """Association manager which keeps associations in an
    C{L{OpenIDStore<openid_select.store.interface.OpenIDStore>}} and
    requests new ones with an unencrypted (C{no-encryption}) association
    session.

    Unencrypted sessions are only requested over HTTPS; plain HTTP
    endpoints are used in stateless mode.

    @ivar assoc_type: The MAC function to request.
    """

    def __init__(self, store, assoc_type='HMAC-SHA1'):
        getSecretSize(assoc_type)
        self.store = store
        self.assoc_type = assoc_type

    def associate(self, server_url, version):
        if self.store.isDumb():
            return True

        if self.getAssociation(server_url) is not None:
            return True

        if not server_url.startswith('https://'):
            _LOGGER.debug('Not associating with %s over an unencrypted channel', server_url)
            return True

        assoc = self._requestAssociation(server_url, version)
        if assoc is None:
            return False

        self.store.storeAssociation(server_url, assoc)
        return True

    def getAssociation(self, server_url):
        assoc = self.store.getAssociation(server_url)
        if assoc is None or assoc.expiresIn <= 0:
            return None
        return assoc

    def _createAssociateRequest(self, version):
        args = {
            'openid.mode': 'associate',
            'openid.assoc_type': self.assoc_type,
        }
        if version >= OPENID_2_0:
            args['openid.ns'] = OPENID2_NS
            args['openid.session_type'] = 'no-encryption'
        return args

    def _requestAssociation(self, server_url, version):
        """Make one association request to the provider and process the
        response.

        @return: The new association or C{None} if the handshake failed.
        """
        body = urlencode(sorted(self._createAssociateRequest(version).items())).encode('utf-8')
        headers = {'Content-Type': 'application/x-www-form-urlencoded'}
        try:
            response = fetchers.fetch(server_url, body=body, headers=headers)
        except fetchers.HTTPFetchingError as why:
            _LOGGER.warning('Association request to %s failed: %s', server_url, why.why)
            return None

        if response.status != 200:
            _LOGGER.warning('Association request to %s returned status %s', server_url, response.status)
            return None

        try:
            return self._extractAssociation(kvform.kvToDict(oidutil.force_text(response.body or b'')))
        except (KeyError, ValueError) as why:
            _LOGGER.warning('Invalid association response from %s: %s', server_url, why)
            return None

    def _extractAssociation(self, args):
        """Build the association from the key-value response.

        @raises KeyError: If a required field is missing
        @raises ValueError: If a field has an invalid value
        """
        if 'error' in args:
            raise ValueError('Provider refused the association: %s' % args['error'])

        assoc_type = args['assoc_type']
        if assoc_type != self.assoc_type:
            raise ValueError('Unexpected association type %r' % (assoc_type,))

        session_type = args.get('session_type', 'no-encryption')
        if session_type not in ('', 'no-encryption'):
            raise ValueError('Unexpected session type %r' % (session_type,))

        handle = args['assoc_handle']
        expires_in = int(args['expires_in'])
        secret = oidutil.fromBase64(args['mac_key'])
        if len(secret) != getSecretSize(assoc_type):
            raise ValueError('Secret has length %d, expected %d' % (len(secret), getSecretSize(assoc_type)))

        return Association.fromExpiresIn(expires_in, handle, secret, assoc_type)

"""Attribute exchange fetch request.

Providers which only accept the directed identity commonly return the
user's attributes (email, name) only through attribute exchange.  See
U{http://openid.net/specs/openid-attribute-exchange-1_0.html}.
"""
import re

from openid_select.extension import Extension

__all__ = ['AttrInfo', 'FetchRequest', 'ns_uri', 'UNLIMITED_VALUES']

ns_uri = 'http://openid.net/srv/ax/1.0'

# Use this as the 'count' value for an attribute in a FetchRequest to
# ask for as many values as the provider has.
UNLIMITED_VALUES = 'unlimited'

ALIAS_RE = re.compile(r'^[^,.]+$')


class AttrInfo(object):
    """Description of one requested attribute.

    @ivar type_uri: The type URI of the attribute
    @ivar alias: Name of the attribute in the request arguments
    @ivar required: Whether the attribute is required
    @ivar count: Number of values requested, or L{UNLIMITED_VALUES}
    """

    def __init__(self, type_uri, alias, required=False, count=1):
        self.type_uri = type_uri
        self.alias = alias
        self.required = required
        self.count = count


class FetchRequest(Extension):
    """An attribute exchange C{fetch_request}.

    @ivar attributes: Requested attributes in the order they were added
    @type attributes: List[AttrInfo]

    @ivar update_url: URL the provider may send updates to
    """
    ns_uri = ns_uri

    def __init__(self, update_url=None):
        self.attributes = []
        self.update_url = update_url

    def add(self, type_uri, alias=None, required=False, count=1):
        """Request an attribute.

        @param alias: Name of the attribute in the request; generated
            when not given.

        @raise ValueError: If the attribute or alias was already added
            or the alias is not valid.
        """
        if alias is None:
            alias = 'ext%d' % len(self.attributes)
        if not ALIAS_RE.match(alias):
            raise ValueError('Invalid attribute alias %r' % (alias,))

        for attr in self.attributes:
            if attr.type_uri == type_uri:
                raise ValueError('Attribute %r requested twice' % (type_uri,))
            if attr.alias == alias:
                raise ValueError('Alias %r used twice' % (alias,))

        attr = AttrInfo(type_uri, alias, required, count)
        self.attributes.append(attr)
        return attr

    def __contains__(self, type_uri):
        return any(attr.type_uri == type_uri for attr in self.attributes)

    def prepareRequest(self, params):
        # Attribute exchange is not defined for OpenID 1 requests.
        if 'openid.ns' not in params:
            return False

        params['openid.ns.ax'] = self.ns_uri
        params['openid.ax.mode'] = 'fetch_request'

        required = []
        if_available = []
        for attr in self.attributes:
            params['openid.ax.type.%s' % attr.alias] = attr.type_uri
            if attr.count != 1:
                params['openid.ax.count.%s' % attr.alias] = str(attr.count)
            if attr.required:
                required.append(attr.alias)
            else:
                if_available.append(attr.alias)

        if required:
            params['openid.ax.required'] = ','.join(required)
        if if_available:
            params['openid.ax.if_available'] = ','.join(if_available)
        if self.update_url:
            params['openid.ax.update_url'] = self.update_url
        return True

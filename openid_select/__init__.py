"""
This package is an implementation of the relying party ("consumer")
side of OpenID authentication for providers that only accept the
directed identity placeholder before the user authenticates.

For starting an authentication, see the C{L{openid_select.consumer.consumer}}
module.  For the stores used to cache discovery results and
associations, see C{L{openid_select.store}}.
"""

__version__ = '1.0.0'

version_info = tuple(int(part) for part in __version__.split('.'))

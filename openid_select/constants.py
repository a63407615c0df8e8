"""Basic constants for openid_select library."""

# The OpenID 2.0 message namespace, sent as openid.ns.
OPENID2_NS = 'http://specs.openid.net/auth/2.0'

# Placeholder sent as both openid.identity and openid.claimed_id.  It tells
# the provider to let the user pick the identity interactively.
IDENTIFIER_SELECT = 'http://specs.openid.net/auth/2.0/identifier_select'

OPENID_1_1 = 1.1
OPENID_2_0 = 2.0

# Lifetime of a freshly discovered record in the discovery cache, in seconds.
DISCOVERY_LIFETIME = 60 * 60

# Longest URL that may be sent as a GET redirect; longer requests are
# sent as an auto-submitting form.
OPENID1_URL_LIMIT = 2047

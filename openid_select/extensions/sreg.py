"""Simple registration request extension.

Asks the provider for profile fields of the user, e.g. nickname and
email.  See U{http://openid.net/specs/openid-simple-registration-extension-1_1-01.html}.

Example::

    sreg_request = sreg.SRegRequest(required=['email'], optional=['nickname'])
    consumer.checkIdSetup(identifier, return_to, extensions=[sreg_request])
"""
from openid_select.extension import Extension

__all__ = ['SRegRequest', 'data_fields', 'ns_uri', 'checkFieldName']

# Fields defined by Simple Registration 1.1
data_fields = {
    'fullname': 'Full Name',
    'nickname': 'Nickname',
    'dob': 'Date of Birth',
    'email': 'E-mail Address',
    'gender': 'Gender',
    'postcode': 'Postal Code',
    'country': 'Country',
    'language': 'Language',
    'timezone': 'Time Zone',
}

ns_uri = 'http://openid.net/extensions/sreg/1.1'
ns_alias = 'sreg'


def checkFieldName(field_name):
    """Check to see that the given value is a valid simple
    registration data field name.

    @raise ValueError: if the field name is not a valid simple
        registration data field name
    """
    if field_name not in data_fields:
        raise ValueError('%r is not a defined simple registration field' % (field_name,))


class SRegRequest(Extension):
    """Request of simple registration fields.

    @ivar required: Fields the consumer can not do without
    @type required: List[str]

    @ivar optional: Fields the consumer would like to have
    @type optional: List[str]

    @ivar policy_url: URL of the consumer's privacy policy
    @type policy_url: str or NoneType
    """
    ns_uri = ns_uri

    def __init__(self, required=None, optional=None, policy_url=None):
        self.required = list(required or [])
        self.optional = list(optional or [])
        self.policy_url = policy_url

    def prepareRequest(self, params):
        try:
            for field_name in self.required + self.optional:
                checkFieldName(field_name)
        except ValueError:
            return False

        # OpenID 1 requests carry the sreg arguments without a namespace declaration.
        if 'openid.ns' in params:
            params['openid.ns.%s' % ns_alias] = self.ns_uri

        if self.required:
            params['openid.sreg.required'] = ','.join(self.required)
        if self.optional:
            params['openid.sreg.optional'] = ','.join(self.optional)
        if self.policy_url:
            params['openid.sreg.policy_url'] = self.policy_url
        return True

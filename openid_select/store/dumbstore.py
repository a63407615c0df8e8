"""A store which keeps nothing."""
from openid_select.store.interface import OpenIDStore


class DumbStore(OpenIDStore):
    """
    Store for consumers which can not keep any state between requests.

    Nothing is stored, so discovery is performed for every
    authentication request and no association is ever made; the
    requests are sent in stateless mode and the provider's answer has
    to be verified with the provider directly.
    """

    def storeAssociation(self, server_url, association):
        pass

    def getAssociation(self, server_url, handle=None):
        return None

    def removeAssociation(self, server_url, handle):
        return False

    def addDiscoveryInfo(self, record):
        pass

    def getDiscoveryInfo(self, claimed_id):
        return None

    def removeDiscoveryInfo(self, claimed_id):
        return False

    def cleanup(self):
        return 0, 0

    def isDumb(self):
        """Always C{True}, associations are not attempted with this store."""
        return True

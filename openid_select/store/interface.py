"""
This module contains the definition of the C{L{OpenIDStore}}
interface.
"""


class OpenIDStore(object):
    """
    This is the interface for the store objects the library uses.  It
    is a single class that provides all of the persistence the
    consumer needs: associations with providers and the discovery
    cache.

    Records are never updated in place.  Implementations must publish
    a stored record completely, so that concurrent readers never see a
    partially written one.

    @sort: storeAssociation, getAssociation, removeAssociation,
        addDiscoveryInfo, getDiscoveryInfo, removeDiscoveryInfo,
        cleanup, isDumb
    """

    def storeAssociation(self, server_url, association):
        """
        This method puts a C{L{Association
        <openid_select.association.Association>}} object into storage,
        retrievable by server URL and handle.

        @param server_url: The URL of the provider endpoint that this
            association is with.
        @type server_url: str

        @param association: The association to store.
        @type association: C{L{Association
            <openid_select.association.Association>}}

        @rtype: NoneType
        """
        raise NotImplementedError

    def getAssociation(self, server_url, handle=None):
        """
        This method returns an C{L{Association
        <openid_select.association.Association>}} object from storage
        that matches the server URL and, if specified, handle. It
        returns C{None} if no such association is found or if the
        matching association is expired.

        If no handle is specified, the store returns the association
        which was issued most recently.

        This method is allowed to garbage collect expired associations
        when found. This method must not return expired associations.

        @type server_url: str
        @type handle: str or NoneType
        @rtype: C{L{Association <openid_select.association.Association>}} or
            C{NoneType}
        """
        raise NotImplementedError

    def removeAssociation(self, server_url, handle):
        """
        This method removes the matching association if it's found,
        and returns whether the association was removed or not.

        @type server_url: str
        @type handle: str
        @rtype: bool
        """
        raise NotImplementedError

    def addDiscoveryInfo(self, record):
        """
        Store a discovery result, replacing any previous result for the
        same claimed identifier.

        @param record: The discovery result, keyed by its C{claimed_id}.
        @type record: C{L{DiscoveryRecord
            <openid_select.consumer.discover.DiscoveryRecord>}}

        @rtype: NoneType
        """
        raise NotImplementedError

    def getDiscoveryInfo(self, claimed_id):
        """
        Return the discovery result stored for exactly this claimed
        identifier, or C{None} if there is none or it has expired.

        @type claimed_id: str
        @rtype: C{L{DiscoveryRecord
            <openid_select.consumer.discover.DiscoveryRecord>}} or NoneType
        """
        raise NotImplementedError

    def removeDiscoveryInfo(self, claimed_id):
        """
        Remove the discovery result for the claimed identifier.

        @rtype: bool
        """
        raise NotImplementedError

    def cleanup(self):
        """Remove expired associations and discovery results.

        @return: tuple of (removed associations, removed discovery results)
        @rtype: Tuple[int, int]
        """
        raise NotImplementedError

    def isDumb(self):
        """
        This method must return C{True} if the store is a dumb-mode
        store, one which does not keep associations.

        @rtype: bool
        """
        return False

"""A simple store using only in-process memory."""
import threading
import time

from openid_select.store.interface import OpenIDStore


class ServerAssocs(object):
    def __init__(self):
        self.assocs = {}

    def set(self, assoc):
        self.assocs[assoc.handle] = assoc

    def get(self, handle):
        return self.assocs.get(handle)

    def remove(self, handle):
        try:
            del self.assocs[handle]
        except KeyError:
            return False
        else:
            return True

    def best(self):
        """Returns association with the latest issued date.

        or None if there are no associations.
        """
        best = None
        for assoc in self.assocs.values():
            if best is None or best.issued < assoc.issued:
                best = assoc
        return best

    def cleanup(self):
        expired = [a.handle for a in self.assocs.values() if a.expiresIn <= 0]
        for handle in expired:
            del self.assocs[handle]
        return len(expired), len(self.assocs)


class MemoryStore(OpenIDStore):
    """In-process memory store.

    Use for single long-running processes.  No persistence supplied.
    The store may be shared between threads.
    """

    def __init__(self):
        self.server_assocs = {}
        self.discovery = {}
        self._lock = threading.Lock()

    def _getServerAssocs(self, server_url):
        try:
            return self.server_assocs[server_url]
        except KeyError:
            assocs = self.server_assocs[server_url] = ServerAssocs()
            return assocs

    def storeAssociation(self, server_url, assoc):
        with self._lock:
            self._getServerAssocs(server_url).set(assoc)

    def getAssociation(self, server_url, handle=None):
        with self._lock:
            assocs = self._getServerAssocs(server_url)
            if handle is None:
                assoc = assocs.best()
            else:
                assoc = assocs.get(handle)

            if assoc is not None and assoc.expiresIn <= 0:
                assocs.remove(assoc.handle)
                return None
            return assoc

    def removeAssociation(self, server_url, handle):
        with self._lock:
            return self._getServerAssocs(server_url).remove(handle)

    def addDiscoveryInfo(self, record):
        with self._lock:
            self.discovery[record.claimed_id] = record

    def getDiscoveryInfo(self, claimed_id):
        with self._lock:
            record = self.discovery.get(claimed_id)
            if record is not None and record.expires <= time.time():
                del self.discovery[claimed_id]
                return None
            return record

    def removeDiscoveryInfo(self, claimed_id):
        with self._lock:
            return self.discovery.pop(claimed_id, None) is not None

    def cleanup(self):
        now = time.time()
        with self._lock:
            removed_assocs = 0
            for server_url, assocs in list(self.server_assocs.items()):
                removed, remaining = assocs.cleanup()
                removed_assocs += removed
                if not remaining:
                    del self.server_assocs[server_url]

            expired = [k for k, record in self.discovery.items() if record.expires <= now]
            for claimed_id in expired:
                del self.discovery[claimed_id]

        return removed_assocs, len(expired)

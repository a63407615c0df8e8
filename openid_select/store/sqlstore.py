"""
Stores backed by an SQL database.

Every public method runs in its own transaction on the connection
given to the store.  The statements are class attributes named
C{<name>_sql}; C{self.db_<name>(*args)} executes the statement with
the table names filled in.
"""
import time

from openid_select.association import Association
from openid_select.consumer.discover import DiscoveryRecord
from openid_select.store.interface import OpenIDStore


def _inTxn(func):
    def wrapped(self, *args, **kwargs):
        return self._callInTransaction(func, self, *args, **kwargs)

    wrapped.__name__ = func.__name__[4:]
    wrapped.__doc__ = func.__doc__
    return wrapped


class SQLStore(OpenIDStore):
    """
    Logic shared by the SQL stores.  Subclasses provide the statements
    for a particular database.

    The tables are created by L{createTables}.

    @cvar associations_table: Default name of the table of associations
    @cvar discovery_table: Default name of the table of discovery results
    """

    associations_table = 'oid_associations'
    discovery_table = 'oid_discovery'

    def __init__(self, conn, associations_table=None, discovery_table=None):
        """
        @param conn: Open DB-API connection of the database the
            subclass is written for.

        @param associations_table: Name of the table of associations,
            L{associations_table} when not given.
        @type associations_table: str

        @param discovery_table: Name of the table of discovery
            results, L{discovery_table} when not given.
        @type discovery_table: str
        """
        self.conn = conn
        self.cur = None
        self._statements = {}
        self._table_names = {
            'associations': associations_table or self.associations_table,
            'discovery': discovery_table or self.discovery_table,
        }

    def blobDecode(self, blob):
        """Convert a blob column value into bytes."""
        return blob

    def blobEncode(self, data):
        """Convert bytes into a value for a blob column."""
        return data

    def _execSQL(self, sql_name, *args):
        try:
            sql = self._statements[sql_name]
        except KeyError:
            sql = self._statements[sql_name] = getattr(self, sql_name) % self._table_names
        self.cur.execute(sql, args)

    def __getattr__(self, attr):
        # db_<name> executes the statement <name>_sql
        if not attr.startswith('db_'):
            raise AttributeError('Attribute %r not found' % (attr,))
        sql_name = attr[3:] + '_sql'

        def func(*args):
            return self._execSQL(sql_name, *args)
        setattr(self, attr, func)
        return func

    def _callInTransaction(self, func, *args, **kwargs):
        """Call the function with an open cursor in a transaction which
        is committed on success and rolled back on any error."""
        # Discard anything left open on the connection.
        self.conn.rollback()

        try:
            self.cur = self.conn.cursor()
            try:
                result = func(*args, **kwargs)
            finally:
                self.cur.close()
                self.cur = None
        except Exception:
            self.conn.rollback()
            raise
        self.conn.commit()
        return result

    def txn_createTables(self):
        """Create the tables of the store.  They must not exist yet."""
        self.db_create_assoc()
        self.db_create_discovery()

    createTables = _inTxn(txn_createTables)

    def txn_storeAssociation(self, server_url, association):
        self.db_set_assoc(server_url, association.handle, self.blobEncode(association.secret), association.issued,
                          association.lifetime, association.assoc_type)

    storeAssociation = _inTxn(txn_storeAssociation)

    def txn_getAssociation(self, server_url, handle=None):
        if handle is None:
            self.db_get_assocs(server_url)
        else:
            self.db_get_assoc(server_url, handle)

        live = []
        for assoc_handle, secret, issued, lifetime, assoc_type in self.cur.fetchall():
            assoc = Association(assoc_handle, self.blobDecode(secret), issued, lifetime, assoc_type)
            if assoc.expiresIn <= 0:
                self.txn_removeAssociation(server_url, assoc.handle)
            else:
                live.append(assoc)
        return max(live, key=lambda a: a.issued, default=None)

    getAssociation = _inTxn(txn_getAssociation)

    def txn_removeAssociation(self, server_url, handle):
        self.db_remove_assoc(server_url, handle)
        return self.cur.rowcount > 0

    removeAssociation = _inTxn(txn_removeAssociation)

    def txn_addDiscoveryInfo(self, record):
        self.db_set_discovery(*record)

    addDiscoveryInfo = _inTxn(txn_addDiscoveryInfo)

    def txn_getDiscoveryInfo(self, claimed_id):
        self.db_get_discovery(claimed_id)
        row = self.cur.fetchone()
        if row is None:
            return None

        record = DiscoveryRecord(*row)
        if record.expires <= time.time():
            self.db_remove_discovery(claimed_id)
            return None
        return record

    getDiscoveryInfo = _inTxn(txn_getDiscoveryInfo)

    def txn_removeDiscoveryInfo(self, claimed_id):
        self.db_remove_discovery(claimed_id)
        return self.cur.rowcount > 0

    removeDiscoveryInfo = _inTxn(txn_removeDiscoveryInfo)

    def txn_cleanup(self):
        now = int(time.time())
        self.db_clean_assoc(now)
        removed_assocs = self.cur.rowcount
        self.db_clean_discovery(now)
        return removed_assocs, self.cur.rowcount

    cleanup = _inTxn(txn_cleanup)


class SQLiteStore(SQLStore):
    """
    Store in an SQLite database, e.g.::

        store = SQLiteStore(sqlite3.connect('openid.db'))
        store.createTables()
    """

    create_assoc_sql = """
    CREATE TABLE %(associations)s
    (
        server_url VARCHAR(2047),
        handle VARCHAR(255),
        secret BLOB(128),
        issued INTEGER,
        lifetime INTEGER,
        assoc_type VARCHAR(64),
        PRIMARY KEY (server_url, handle)
    );
    """

    create_discovery_sql = """
    CREATE TABLE %(discovery)s
    (
        claimed_id VARCHAR(2047) PRIMARY KEY,
        real_id VARCHAR(2047),
        server_url VARCHAR(2047),
        version REAL,
        expires INTEGER
    );
    """

    set_assoc_sql = 'INSERT OR REPLACE INTO %(associations)s VALUES (?, ?, ?, ?, ?, ?);'
    get_assocs_sql = 'SELECT handle, secret, issued, lifetime, assoc_type FROM %(associations)s WHERE server_url = ?;'
    get_assoc_sql = ('SELECT handle, secret, issued, lifetime, assoc_type FROM %(associations)s '
                     'WHERE server_url = ? AND handle = ?;')
    remove_assoc_sql = 'DELETE FROM %(associations)s WHERE server_url = ? AND handle = ?;'
    clean_assoc_sql = 'DELETE FROM %(associations)s WHERE issued + lifetime <= ?;'

    set_discovery_sql = 'INSERT OR REPLACE INTO %(discovery)s VALUES (?, ?, ?, ?, ?);'
    get_discovery_sql = ('SELECT claimed_id, real_id, server_url, version, expires FROM %(discovery)s '
                         'WHERE claimed_id = ?;')
    remove_discovery_sql = 'DELETE FROM %(discovery)s WHERE claimed_id = ?;'
    clean_discovery_sql = 'DELETE FROM %(discovery)s WHERE expires <= ?;'

    def blobDecode(self, buf):
        return bytes(buf)

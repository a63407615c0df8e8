"""
This package contains the modules related to this library's use of
persistent storage: cached discovery results and associations.

@sort: interface, memstore, sqlstore, dumbstore
"""

__all__ = ['interface', 'memstore', 'sqlstore', 'dumbstore']

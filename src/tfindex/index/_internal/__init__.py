"""Indexing engine internals. Use ``tfindex.index`` instead."""

"""products/ -- Product records and their owner-scoped persistence.

Layer rule: products/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or auth/. Ownership is expressed as a plain
owner_id integer, so this package has no knowledge of how users authenticate.
"""

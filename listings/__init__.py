"""listings/ -- Schema-less document store for supply and post listings.

Layer rule: listings/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/ or auth/.
"""

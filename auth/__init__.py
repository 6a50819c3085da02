"""auth/ -- Account registration, password hashing and token issuance for Harve Share.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/ or listings/.
api/ imports from auth/, not the other way around.
"""

"""auth/ -- Credential checks and session tokens for the documentation gateway.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/, frameworks/, or cache/.
frameworks/ imports from auth/, not the other way around.
"""

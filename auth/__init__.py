"""auth/ -- Authentication and session package for Vendorify.

Layer rule: auth/ imports only stdlib + third-party libraries + core/.
It does NOT import from api/, web/, or vendors/.
api/ and web/ import from auth/, not the other way around.
"""

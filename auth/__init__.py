"""auth/ -- Authentication and authorization package for the portfolio API.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or portfolio/.
api/ imports from auth/, not the other way around.
"""

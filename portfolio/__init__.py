"""portfolio/ -- Content repositories and the image upload handler.

Layer rule: portfolio/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or auth/, and it knows nothing about HTTP.
"""

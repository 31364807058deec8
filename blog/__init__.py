"""blog/ -- Blog post domain and persistence.

Layer rule: blog/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/ or auth/. Author data reaches it as plain objects
handed in by the route layer.
"""

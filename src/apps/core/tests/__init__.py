"""
Core app tests package.

Health probes, middleware, and the service error plumbing shared by every
app.
"""

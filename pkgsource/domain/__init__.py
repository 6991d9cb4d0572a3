"""
Domain models and pure helpers: configuration, package source descriptors,
packages, and the resolved-source decision.
"""

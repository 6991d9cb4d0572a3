"""
Run-time services: command-line overrides, source resolution, query facade
and the downstream notification hooks.
"""

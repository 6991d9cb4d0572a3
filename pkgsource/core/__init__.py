"""
Settings, logging helpers and the composition root.
"""

"""
File-backed state: the configuration file, its logical location, the host
preference store, and relocation of the configuration file.
"""

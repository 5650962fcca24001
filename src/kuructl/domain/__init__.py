"""Domain layer — commands, registries, and console locations.

Pure data with no I/O. Everything here is immutable once constructed.
"""

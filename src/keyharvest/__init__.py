"""
keyharvest - extract localization keys from source files, grouped by namespace.
"""

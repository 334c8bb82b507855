"""Core infrastructure for appdeck.

Paths, configuration, the persisted key-value store and the CLI theme.
"""

"""Repackage an Android library module as a Unity Android plugin."""
__version__ = "0.1.0"

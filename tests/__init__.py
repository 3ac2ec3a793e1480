"""Test package marker.

Keeps ``tests`` importable as a package; the file exposes no symbols and must
stay free of side effects.
"""

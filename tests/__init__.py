"""
Test package for the placement portal.

Shared fakes live in tests/fakes.py; fixtures in tests/conftest.py.
"""

"""
Test configuration package.

Holds the pytest marker definitions shared by the whole suite.
"""

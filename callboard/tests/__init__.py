"""
Test suite for the Callboard analytics backend.
"""

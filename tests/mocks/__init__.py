"""
Test doubles for external processes.
"""

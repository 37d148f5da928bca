"""
Shared utilities for the News and Book API.
"""

"""
Shared constants and logging helpers.
"""

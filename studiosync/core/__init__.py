"""
Core infrastructure: settings, exceptions and logging.
"""

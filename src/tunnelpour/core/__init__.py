"""
Core engine, configuration and error handling.
"""

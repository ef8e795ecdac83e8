"""
Core utilities shared across the course API: configuration and logging.
"""

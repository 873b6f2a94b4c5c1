"""Infrastructure module.

Configuration, logging, and database plumbing.
"""

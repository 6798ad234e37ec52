"""
API package - HTTP routes and dependency providers.
"""

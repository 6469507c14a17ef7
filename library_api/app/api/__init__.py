"""
API package: dependencies, exception handlers and versioned routes.
"""

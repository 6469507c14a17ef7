"""
Core infrastructure shared by every layer: settings, logging,
database access, the error taxonomy and input validation.
"""

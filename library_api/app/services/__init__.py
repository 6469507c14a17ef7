"""
Service layer.

Services hold the business rules that span several stores.  They get
their stores and the database handle through their constructor, so
API handlers and tests decide what they run against.
"""

"""
Pydantic schema definitions for API payloads.

Each part of the library (books, borrowers, loans) defines its own
request and response models.  JSON field names are camelCase
(``shelfLocation``, ``borrowerId``) via aliases; Python code uses the
snake_case attribute names.
"""

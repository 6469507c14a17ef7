"""
Persistence layer.

Each store wraps one table of the SQLite database and receives the
shared ``Database`` handle in its constructor.  Stores raise the
errors from ``core.errors`` for expected failures; joining a larger
transaction is handled by ``Database.transaction``.
"""

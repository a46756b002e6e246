"""
Service layer.

Each service encapsulates the queries for one table and is the only
place where SQL is written.  Endpoints call services with already
validated schema objects.
"""

"""
Pydantic schema definitions for API payloads.

Each entity (tasks, execution results, chat messages) defines its own
create, query and read models.  Schemas are separated from the SQL
layer to decouple the API representation from persistence.
"""

"""
Persistence layer: engine/session setup, SQLAlchemy models and CRUD helpers.
"""

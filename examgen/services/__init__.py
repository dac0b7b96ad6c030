"""
Service layer: multi-step operations that span generation and persistence.
"""

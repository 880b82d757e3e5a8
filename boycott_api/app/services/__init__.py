"""
Service layer.

Each service encapsulates the store access and business rules for one
collection.  Endpoints call services and never issue SQL themselves.
"""

"""
Pydantic schema definitions for API payloads.

Request bodies are validated by the models in ``product`` and
``recommendation``; ``results`` holds the write-result envelopes.
Documents read back from the store are schema-less and are returned
as plain dictionaries.
"""

"""
Pydantic schema definitions for API payloads.

Schemas are separated from the domain records in ``models`` to decouple
the wire representation from persistence.
"""

"""Core IR, tag aggregation, pagination and collaborator contracts.

WHY: The core package holds the stable heart of the serializer: the
entity projections and record types every formatter consumes, plus the
two small algorithms (tag aggregation, pagination) all collections share.

HOW: ir.py defines the data structures, tags.py and pagination.py the
shared algorithms, collaborators.py the Protocols for the store, rating,
URL and vote services the facade talks to.

RULES:
- IR dataclasses are the contract — change with care
- Nothing in core knows about XML, JSON or envelopes
- Core modules never perform I/O
"""

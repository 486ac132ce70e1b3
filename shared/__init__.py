"""
Shared Kernel

Building blocks reused by every app of the rental engine: base domain
classes, value objects (money and date ranges), the unit of work, the
message bus and the record store adapters.
"""

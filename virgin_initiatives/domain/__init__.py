"""Domain layer.

Entities, value objects, ports and pure services. Nothing in this package
performs I/O; adapters live in ``virgin_initiatives.infrastructure``.
"""

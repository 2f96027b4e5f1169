"""Business modules for Gatekeeper.

Each module is self-contained with its own models, schemas, services and
routes.
"""

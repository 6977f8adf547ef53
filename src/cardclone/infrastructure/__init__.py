"""Infrastructure layer — the simulated host: database, deployment, forwarding.

This layer depends on stdlib, SQLAlchemy, the domain layer's protocol
constants, and the plugin event log. It must never import from commands or
output.
"""

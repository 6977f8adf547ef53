"""Domain layer — codec, stub, compositor, and template behaviour.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""

"""Domain layer: record models, collection rules, selectors.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""

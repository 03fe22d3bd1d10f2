"""Domain layer — graph records, view state and style tables.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, render, commands, or config.
"""

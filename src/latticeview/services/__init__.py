"""Service layer — the view pipeline and the operations built on it.

Services may import from domain, infrastructure, render and plugins.
They must never import from commands or output.
"""

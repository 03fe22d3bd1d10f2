"""Infrastructure layer — networkx graph engine and dataset loading.

This layer depends on stdlib, pydantic and networkx.
It must never import from services, render, commands, or output.
"""

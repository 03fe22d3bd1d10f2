"""Render layer — adapter contract, element serialisation and layouts.

May import from domain, infrastructure and the layout selector.
The view core talks to renderers only through ``RenderAdapter``.
"""

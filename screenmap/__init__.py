"""Design document to screen descriptor engine.

Subpackages:
- engine: Node model, classification, extraction, geometry, sections, assembly
- integrations: External clients (Figma REST API)
"""

"""HTTP blueprints.

Each module defines one blueprint; ``create_app`` registers them under their
URL prefixes.
"""

# recipe_profile/__init__.py
"""
Site installation profile that applies configuration recipes.

Recipes are loaded from a cookbook directory, expanded into ordered,
idempotent operations and applied to a site as a resumable batch job.
"""

__version__ = "0.1.0"

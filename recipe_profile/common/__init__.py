# recipe_profile/common/__init__.py
"""
Shared helpers for logging and file handling.
"""

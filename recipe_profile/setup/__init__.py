# recipe_profile/setup/__init__.py
"""
Settings models, configuration loading and batch state persistence.
"""

# recipe_profile/batch/__init__.py
"""
Batch jobs and the executor that runs them.
"""

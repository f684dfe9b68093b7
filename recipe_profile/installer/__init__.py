# recipe_profile/installer/__init__.py
"""
Installer workflow: site backends, the recipe orchestrator, install tasks
and user-facing messaging.
"""

"""
Newsletter Modules
==================

Flask blueprint modules and their collaborators.
"""

__all__ = ['email', 'subscribers']

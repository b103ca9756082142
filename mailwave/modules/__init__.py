"""
MailWave Modules
================

Flask blueprints for the API (health, subscribers, posts) and the client UI.
"""

__all__ = ['health', 'subscribers', 'posts', 'frontend']

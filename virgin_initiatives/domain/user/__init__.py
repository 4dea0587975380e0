"""User domain module.

Manages user identity, credentials, participation records and profile data.
"""

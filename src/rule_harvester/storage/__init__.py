"""
Storage Package
Local persistence of the API key.
"""

from .credential_store import CredentialStore, API_KEY_KEY, masked

__all__ = ['CredentialStore', 'API_KEY_KEY', 'masked']

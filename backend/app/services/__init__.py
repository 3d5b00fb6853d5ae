"""
Services Module

- credential_store: user accounts (registration, lookup, profile, token revocation)
- assistant_mapping: local <-> Vapi.ai field translation
- vapi_client: Vapi.ai assistant API client
- assistant_registry: owner-scoped shadow rows
- assistant_sync: create / update / delete consistency protocol
"""
from .vapi_client import VapiClient, vapi_client

__all__ = [
    "VapiClient",
    "vapi_client",
]

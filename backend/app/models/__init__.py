"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account, credentials and business profile
- Assistant: Local shadow record of a provider-hosted voice assistant
- ReconciliationTask: Recorded drift between provider and local state
"""
from .user import User
from .assistant import Assistant
from .reconciliation import ReconciliationTask

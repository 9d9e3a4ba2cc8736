"""
Service layer for the e-signature workflow.

Services:
- stores: persistence contracts injected into the services
- user_manager: signer creation, signing token issuance and signing
"""

from .user_manager import UserManager

__all__ = [
    "UserManager",
]

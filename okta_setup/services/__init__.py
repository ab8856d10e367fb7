"""
Services package for okta-setup.

SetupService coordinates the other services; each of those wraps exactly
one remote API or local file.
"""

from okta_setup.services.setup_service import PropertyNames, SetupService

__all__ = ["PropertyNames", "SetupService"]

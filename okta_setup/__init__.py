"""Okta developer environment setup: org registration, OIDC app provisioning and config merging."""

__version__ = "0.1.0"

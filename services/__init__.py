"""Credential, token, email and authentication services."""

"""Credential and token lifecycle services (AuthFlow, TokenStore, UserAdmin)."""

"""Core infrastructure: configuration and provider integration."""

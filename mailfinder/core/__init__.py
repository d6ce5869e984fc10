"""Core settings for the email discovery service."""

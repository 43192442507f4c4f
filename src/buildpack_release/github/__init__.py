"""GitHub integration."""

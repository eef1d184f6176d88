"""API package: widget endpoints."""

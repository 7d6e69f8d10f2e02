"""Service layer: remote question API client and builder sessions."""

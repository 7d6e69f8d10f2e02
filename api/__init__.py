"""HTTP service for the question structure builder."""

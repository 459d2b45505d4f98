"""Retrieval strategies and the retrieve-then-generate workflow."""

"""Clerk → Postgres user synchronization webhook service."""

"""Clerk user webhook inbound system.

Receives user.created / user.updated / user.deleted webhooks from Clerk.
Each webhook is Svix signature-verified, parsed into a typed event and
applied to the local users table.
"""

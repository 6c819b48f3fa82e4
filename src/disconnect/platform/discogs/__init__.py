"""Discogs infrastructure package.

This package holds the pieces that talk to, or guard traffic towards, the
Discogs API: the shared request governor, its timer scheduling, the HTTP
transport, authentication headers, and the OAuth 1.0a token flow.
"""

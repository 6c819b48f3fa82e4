"""Configuration package for the Discogs client.

Modules are imported explicitly (``disconnect.config.settings``) so that the
logging bootstrap can depend on ``paths`` without loading the TOML file.
"""

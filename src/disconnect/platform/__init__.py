"""Infrastructure adapters: logging and the Discogs HTTP boundary."""

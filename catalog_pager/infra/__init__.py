"""Infrastructure layer: logging and database plumbing."""

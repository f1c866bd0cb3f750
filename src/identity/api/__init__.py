"""Identity API package."""

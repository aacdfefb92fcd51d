"""Domain layer for astrule."""

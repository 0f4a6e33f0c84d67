"""Page rendering services."""

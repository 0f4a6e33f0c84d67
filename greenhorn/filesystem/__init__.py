"""Site configuration and filesystem access."""

"""Quote provider implementations."""

"""Release hosting clients."""

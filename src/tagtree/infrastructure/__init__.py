"""Infrastructure layer — entity document loading and text measurement."""

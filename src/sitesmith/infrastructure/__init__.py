"""Infrastructure layer — filesystem primitives and template rendering."""

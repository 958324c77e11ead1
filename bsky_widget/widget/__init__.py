"""Widget query parsing and HTML rendering."""

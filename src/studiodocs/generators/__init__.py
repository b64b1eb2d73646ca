"""Document generators: one class per document kind."""

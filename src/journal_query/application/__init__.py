"""Application – read-side query engine."""

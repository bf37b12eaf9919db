"""Console interface for Hallowmoon."""

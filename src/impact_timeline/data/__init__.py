"""Built-in datasets used when no external source is configured."""

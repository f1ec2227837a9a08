"""Translation tables, one JSON file per language."""

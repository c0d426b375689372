"""JSON document parsing, foldable row formatting, styling and path indexing."""

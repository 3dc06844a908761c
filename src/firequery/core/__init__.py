"""Core engine: value codec, expression parsing and structured query building."""

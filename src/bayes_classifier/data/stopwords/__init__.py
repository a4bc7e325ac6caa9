"""Per-language stopword lists, one word per line."""

"""crawl_scout.parser: Извлечение метаданных из HTML."""

"""crawl_scout.crawler: Fetcher, модели отчётов и обход в ширину."""

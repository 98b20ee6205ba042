"""scraper-compliance: robots.txt compliance gate for crawl workers."""

__version__ = "0.1.0"

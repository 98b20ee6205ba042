"""Parser package for robots.txt policies."""

from parser.robots import parse_crawl_delay, parse_robots_txt

__all__ = ["parse_crawl_delay", "parse_robots_txt"]

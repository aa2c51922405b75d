"""Fetch web pages and report their structural and SEO signals."""

"""
Static site generators: homepage brief, SEO landing pages, sector pages,
RSS feed, sitemap and dated archive.

Each module is runnable on its own (python publish/<name>.py) and exposes a
pipeline class that generate_all.py runs in sequence.
"""

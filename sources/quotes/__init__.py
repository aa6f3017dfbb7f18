"""
Stock quote source (Yahoo Finance chart API).

Fetches last price, prior close and volume per ticker, then ranks the
results into gainers, decliners and most-active views for the page
generators.
"""

"""Scrape emendas (amendments) of a Senado Federal bill into JSON, CSV and PDFs."""

__version__ = "1.0.0"

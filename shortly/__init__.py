"""Asynchronous URL-shortening HTTP service backed by Bitly or TinyURL, cached in Redis."""

__version__ = "0.1.0"
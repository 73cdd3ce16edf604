"""
melody-fetcher: locate, download and describe audio tracks through the
media-get resolver and a plain HTTP downloader.
"""

__version__ = "0.3.0"

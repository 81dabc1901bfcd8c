"""tinycurl: a single-request HTTP client for the command line."""

__version__ = "0.1.0"

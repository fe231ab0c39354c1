"""examdesk: REST backend for a school test-taking platform."""

__version__ = "0.1.0"

"""Template helpers, verification codes, UI settings, list caching and PostgreSQL stores for a discussion board."""

__version__ = "0.1.0"
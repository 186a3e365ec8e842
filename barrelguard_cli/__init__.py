"""barrelguard: virtual module boundary linter for JavaScript/TypeScript trees."""

__version__ = "0.3.0"

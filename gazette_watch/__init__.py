"""
Gazette Watch - official gazette monitoring and term alerting.

Architecture:
- core/: Stable foundation (models, HTTP client, normalizer, matcher, routing)
- collectors/: Edition discovery strategies (listing page, fixed URL, manual)
- plugins/: Document text extraction (PDF)
- storage/: Key-value persistence for history and group configuration
- notifiers/: Email and chat transports
- config/: YAML-driven source definitions and environment settings
"""

__version__ = "0.1.0"
__all__ = ["__version__"]

"""Version information for the Jira OAuth2 client.

Single source of truth for version number.
"""

__version__ = "1.1.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))

# Version history:
# 1.1.0 - Paginated search helpers, token rotation, settings and structured logging
# 1.0.8 - Attachment upload, project schemes, agile board endpoints

"""HTTP API for the bookmarks server."""

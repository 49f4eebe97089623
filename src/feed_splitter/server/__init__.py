"""HTTP surface for the published show feeds."""

from feed_splitter.server.app import create_app

__all__ = ["create_app"]

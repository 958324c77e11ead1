"""bsky-widget: Bluesky hashtag widget server for Glance dashboards."""

__version__ = "0.1.0"

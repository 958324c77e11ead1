"""Bluesky AppView client: post search and response models."""

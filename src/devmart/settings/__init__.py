"""Application settings: payments/proposals config blobs and site settings."""

"""Configuration layer: settings, file discovery, and logging setup."""

"""Configuration, logging and resource-path support shared across the package."""

"""Core building blocks: errors, constants and configuration."""

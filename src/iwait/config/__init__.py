"""Wait configuration: option model, defaults, and persistent user settings."""

"""Core infrastructure: paths, configuration, theme, and history state."""

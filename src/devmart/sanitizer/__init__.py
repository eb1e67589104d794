"""Rich-text HTML sanitizing."""

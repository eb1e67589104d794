"""Quote request intake and review workflow."""

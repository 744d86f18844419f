"""Schema validators for input documents."""

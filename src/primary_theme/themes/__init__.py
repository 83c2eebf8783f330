"""Output layers: CSS sheets, the built-in semantic tokens and theme.json."""

"""CLI support helpers: output rendering and input validation."""

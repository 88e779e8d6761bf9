"""Brand name word chain game."""

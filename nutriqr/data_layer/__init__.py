"""Record models and product-sheet loading."""

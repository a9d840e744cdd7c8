"""HTTP surface for the NutriQR codec."""

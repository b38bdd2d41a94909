"""HTTP surface for Emissary."""

"""HTTP surface for registered grids and trees."""

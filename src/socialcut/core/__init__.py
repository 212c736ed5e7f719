"""Small pure helpers shared across socialcut."""

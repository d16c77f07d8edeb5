"""Pure calculators. Nothing in here performs I/O or keeps state between calls."""

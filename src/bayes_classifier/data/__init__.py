"""Data files bundled with the classifier."""

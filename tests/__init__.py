"""Field builder test suite."""

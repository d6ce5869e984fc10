"""Email discovery service: candidate generation, ranking and batch discovery."""

"""Services package: candidate generation, ranking and batch discovery."""

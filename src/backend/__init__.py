"""Products backend: validation, business rules and storage for products."""

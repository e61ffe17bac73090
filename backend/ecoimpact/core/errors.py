class InvalidProductInput(ValueError):
    """Raised when a product description cannot be analyzed (e.g. empty name)."""

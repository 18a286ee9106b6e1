"""Local skill manifests: parsing, validation and discovery."""

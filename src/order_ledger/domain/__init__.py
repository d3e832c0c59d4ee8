"""Order domain types and operation names."""

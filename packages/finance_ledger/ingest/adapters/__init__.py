"""Per-format CSV adapters."""

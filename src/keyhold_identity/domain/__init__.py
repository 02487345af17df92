"""Domain layer of keyhold_identity."""

"""Domain layer: game models and pure rules."""

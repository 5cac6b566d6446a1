"""CLI UI components."""

"""Frame export."""

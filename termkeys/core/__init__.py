"""Key event buffering and matching."""

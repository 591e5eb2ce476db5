"""Core provisioning and supervision logic (no CLI rendering)."""

"""Backend services and HTTP surface for locsync."""

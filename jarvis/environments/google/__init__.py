"""Google Workspace integration (Calendar only)."""

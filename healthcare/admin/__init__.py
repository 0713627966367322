"""Admin surface: dashboard, page cache, event system and audit trail."""

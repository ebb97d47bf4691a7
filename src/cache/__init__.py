"""Read-through cache: one encoded file per scope key."""

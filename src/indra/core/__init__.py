"""Task store, dependency graph, urgency, and ordering."""

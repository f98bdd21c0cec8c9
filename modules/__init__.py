"""Time-window state, URL projection and collaborator adapters."""

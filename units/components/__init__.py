"""One module per provisioning unit. Each registers itself on import."""

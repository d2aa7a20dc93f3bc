"""Settings models, loader and host environment for the provisioner."""

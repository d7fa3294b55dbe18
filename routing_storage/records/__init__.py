"""On-disk record layouts shared by the loaders."""

"""Record catalog and archive reader implementations."""

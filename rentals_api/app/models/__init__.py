"""Domain records shared by the store, the service and the mapper."""

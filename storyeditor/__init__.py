"""Story editor frame state: graph sessions and their rendering surfaces."""

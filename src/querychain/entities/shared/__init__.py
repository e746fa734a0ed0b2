"""State, rendering, protocols and clients shared by the query builder."""

"""HTTP interface for browserop."""

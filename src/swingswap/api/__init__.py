"""HTTP request adapter."""

"""REST API for SOPs, exports and personas."""

"""HTTP API over the template variable resolver."""

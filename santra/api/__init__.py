"""HTTP API for submitting and browsing ideas."""

"""Backend health checks, aggregation and periodic monitoring."""

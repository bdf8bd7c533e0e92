"""HTTP layer: routes and error handlers."""

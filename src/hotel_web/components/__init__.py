"""View builders used by routes and templates."""

"""Feed assembly — merge, sort, limit, identify, build."""

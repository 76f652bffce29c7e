"""Demo API routers."""

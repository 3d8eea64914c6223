"""HTTP API: dependencies, error mapping and routers."""

"""Domain core: records, ports, routing, facade and lifecycle."""

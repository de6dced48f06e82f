"""Application layer – query engine, ports and the social services built on them."""

"""Reference workflow service: persistence API and AI flows over HTTP."""

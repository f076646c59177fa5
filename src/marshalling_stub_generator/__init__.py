"""Generate marshalling headers for the opaque types of components."""

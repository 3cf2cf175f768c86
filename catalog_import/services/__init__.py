"""Import pipeline services, stock distribution and persistence collaborators."""

"""HTTP primitives — request snapshot, response builder, body parsing."""

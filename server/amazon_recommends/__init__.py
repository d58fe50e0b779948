"""Product recommendation service keyed by ASIN."""

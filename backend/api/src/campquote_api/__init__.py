"""REST API for the campground stay quote engine."""

"""HTTP dispatch, response resolution, and vehicle/user operations."""

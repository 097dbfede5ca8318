"""HTTP API for Learning Tracker."""

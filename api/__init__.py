"""HTTP interface for the expense tracker."""

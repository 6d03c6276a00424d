"""HTTP surface for the App Clash engine."""

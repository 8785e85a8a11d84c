"""Services Layer: the command translator that turns HTTP requests into store commands."""

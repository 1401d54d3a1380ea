"""Features module for neo-authz."""

"""HTTP clients for the Z.AI and Antigravity services."""

"""Model-backed analysis stages."""

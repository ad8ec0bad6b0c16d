"""Crop farming automation for a single Minecraft avatar."""

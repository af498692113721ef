"""Accessory representations of a robot."""

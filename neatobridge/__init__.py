"""Bridge a cloud-connected Neato robot vacuum to smart-home accessories."""

"""Rasterization, silhouette decoding and SVG painting."""

"""Core compilation pipeline: input IR, namespace, resolution and emission helpers."""

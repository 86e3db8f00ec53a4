"""Training-time serving components.

This module exposes the HDF5 data layer and its batching helpers.
It connects loaded file bundles to model training input pipelines.
"""

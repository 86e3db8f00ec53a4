"""HDF5 input reading.

This module parses file-list manifests and loads declared datasets.
It produces in-memory file bundles for the serving layer.
"""

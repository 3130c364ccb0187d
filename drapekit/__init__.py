"""
DrapeKit — Draping Tutorial Extraction Pipeline

A deterministic pipeline that recovers a strictly-shaped step-by-step
draping tutorial from the free-form output of a generative text model.

The model suggests the tutorial. The pipeline decides its shape.
"""

__version__ = "0.1.0"
__ir_version__ = "0.1.0"

"""
csvinference
============
Desktop screen that runs an ONNX model over every row of a bundled CSV file.
"""

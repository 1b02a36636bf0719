"""
The CONTROLLER layer talks to onnxruntime and runs the batch.
Note: apart from workers.py, modules here should NOT import PySide6.
"""

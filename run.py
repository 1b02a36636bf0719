"""
Development launcher.

Starts the inference window straight from a source checkout, without
`pip install -e .`, by putting ./src in front of sys.path. The installed
entry point is the `csvinference` GUI script (or `python -m csvinference`).
"""
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from csvinference.__main__ import main  # noqa: E402

if __name__ == "__main__":
    main()

"""
The MODEL layer contains pure data structures.
It has NO knowledge of the inference runtime and, apart from the signal store,
NO knowledge of the GUI.
"""

"""
The MODEL layer contains pure data structures and the derived-property logic.
It has NO knowledge of the verification catalogue or of report rendering.
It deals with Geometry, Combustion and the FDS object graph.
"""

"""
The MODEL layer contains pure data structures and math.
It has NO knowledge of the GUI (Qt).
It deals with Projection, Scene entities, and I/O.
"""

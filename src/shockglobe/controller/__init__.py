"""
The CONTROLLER layer owns the mutable view state: the rotation (written by
pointer interaction) and the animation clock (written by the frame loop).
"""

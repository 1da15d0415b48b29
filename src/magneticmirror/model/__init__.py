"""
The MODEL layer holds the simulation parameters and the built trajectory.
It has NO knowledge of the Visualization (PyVista); Qt is only used for signals.
"""

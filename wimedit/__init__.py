"""Read, decode and view the resource files of War in Middle Earth."""

__version__ = "0.1.0"
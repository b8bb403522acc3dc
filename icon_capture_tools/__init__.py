"""
icon_capture_tools

Icon Capture Tools generates fixed-size icon images for lists of renderable
objects. Icons are produced either by rendering each object live and center
cropping the captured frame, or by taking the object's pre-rendered preview
thumbnail and substituting its background color. Icons are written as JPEG,
PNG or TGA files.
"""

__version__ = "1.0.0"
__author__ = "Icon Capture Tools contributors"

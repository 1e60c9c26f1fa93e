"""Imaging subpackage.

Turns archive payloads into pixels and pixels into PNG:

* :mod:`.decoder` reinterprets a 4096-byte payload as a 32x32 RGBA raster.
* :mod:`.compositor` paints rasters bottom to top in ``LayerRole`` order.
* :mod:`.encoder` upscales with Lanczos and writes the PNG container.

Pixel work is NumPy based; resampling and encoding go through Pillow.
"""

import io

import pytest
from PIL import Image, PngImagePlugin


@pytest.fixture
def pillow_png():
    #zapisuje prawdziwy PNG przez Pillow, z opcjonalnymi chunkami tekstowymi
    def build(mode='RGBA', size=(800, 1113), texts=(), itxts=()):
        png_info = PngImagePlugin.PngInfo()
        for key, value in texts:
            png_info.add_text(key, value)
        for key, value, kwargs in itxts:
            png_info.add_itxt(key, value, **kwargs)
        out = io.BytesIO()
        Image.new(mode, size).save(out, 'PNG', pnginfo=png_info)
        return out.getvalue()
    return build

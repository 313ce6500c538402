
from PIL import Image as PIM
import numpy as np

import matplotlib.pyplot as plt

from utils import to_uint8

def aget_ipython():
    try:
        import IPython
        return IPython;
    except ImportError:
        return None;

def runningInNotebook():
    ipyth = aget_ipython();
    if(ipyth is None):
        return False;
    ipyth = ipyth.get_ipython();
    shell = ipyth.__class__.__name__;
    if shell == 'ZMQInteractiveShell':
        return True   # Jupyter notebook or qtconsole
    return False      # Terminal IPython, or a plain interpreter


_ISNOTEBOOK = False;
if(runningInNotebook()):
    _ISNOTEBOOK = True;

def is_notebook():
    return _ISNOTEBOOK;

class Image(object):
    """Image

    Presentation side of a render. Holds display-ready float pixels in
    top-to-bottom row order; values outside [0, 1] are only clipped when
    converted to 8 bits.
    """

    def __init__(self, pixels=None):
        self._samples = None;
        self.pixels = pixels;

    @classmethod
    def FromRenderBuffer(cls, buffer):
        """Wrap a render_image buffer, whose row 0 is the bottom scanline."""
        im = cls(pixels=np.array(buffer, copy=True));
        im.reflectY();
        return im;

    @property
    def pixels(self):
        return self.samples;

    @pixels.setter
    def pixels(self, data):
        self.samples = data;

    @property
    def samples(self):
        return self._samples;

    @samples.setter
    def samples(self, value):
        self._samples = value;

    @property
    def ipixels(self):
        return to_uint8(self.pixels);

    @property
    def shape(self):
        return np.asarray(self.pixels.shape)[:];

    @property
    def width(self):
        return self.shape[1];

    @property
    def height(self):
        return self.shape[0];

    def reflectY(self):
        self.pixels[:, :, :] = self.pixels[::-1, :, :];

    def PIL(self):
        return PIM.fromarray(self.ipixels);

    def show(self, title=None, new_figure=True, **kwargs):
        if (is_notebook()):
            Image.Show(self, new_figure=new_figure, title=title, **kwargs);
        else:
            self.PIL().show(title=title);

    @staticmethod
    def Show(im, title=None, new_figure=True, axis=None, **kwargs):
        if (isinstance(im, Image)):
            imdata = im.ipixels;
        else:
            imdata = im;

        if (new_figure):
            if (title is not None):
                plt.figure(num=title);
            else:
                plt.figure();
        if (axis is not None):
            axis.imshow(imdata, **kwargs);
        else:
            plt.imshow(imdata, **kwargs);
        plt.axis('off');
        if (title):
            plt.title(title);

    def writeToFile(self, output_path=None, **kwargs):
        self.PIL().save(output_path, **kwargs);

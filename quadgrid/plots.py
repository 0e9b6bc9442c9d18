"""Matplotlib views of 2D triangulations"""
import logging

import numpy

try:
    import matplotlib
    from matplotlib import pyplot
    from matplotlib.collections import PolyCollection
except ImportError:
    logging.warning("Plotting functions are unavailable. To use install "
                    "matplotlib, install using ex. `pip install matplotlib` ")
    matplotlib_available = False
else:
    matplotlib_available = True

from quadgrid._grid_out import VTK_ORDER

# Define colours:
lo = numpy.array([242, 189, 138]) / 255  # light orange
do = numpy.array([235, 129, 27]) / 255  # Dark alert orange


def plot_triangulation(tria, ax=None, facecolor=lo, edgecolor=do, lw=0.5,
                       show_vertices=False, title=None):
    """
    Draw the cells of a 2D triangulation.

    :param tria: Triangulation of dimension 2
    :param ax: matplotlib Axes, optional, a new figure is created if omitted
    :param show_vertices: bool, also mark the vertices
    :return: (fig, ax)
    """
    if not matplotlib_available:
        raise ImportError("matplotlib is required for plotting, install "
                          "using ex. `pip install matplotlib`")
    if tria.dim != 2:
        raise NotImplementedError("Only 2D triangulations can be plotted")

    if ax is None:
        fig, ax = pyplot.subplots()
    else:
        fig = ax.figure

    polygons = tria.vertices[tria.cells[:, VTK_ORDER[2]]]
    ax.add_collection(PolyCollection(polygons, facecolors=facecolor,
                                     edgecolors=edgecolor, linewidths=lw))
    if show_vertices:
        ax.plot(tria.vertices[:, 0], tria.vertices[:, 1], '.',
                color=edgecolor, markersize=2)

    ax.autoscale_view()
    ax.set_aspect('equal')
    if title is not None:
        ax.set_title(title)
    return fig, ax


def save_triangulation_plot(tria, filename, dpi=150, **kwargs):
    """Plot ``tria`` and save the figure to ``filename``."""
    fig, ax = plot_triangulation(tria, **kwargs)
    fig.savefig(filename, dpi=dpi)
    pyplot.close(fig)
    logging.debug(f"Saved plot to {filename}")

import matplotlib.pyplot as plt

from minperiod.mapping.orbit import orbit_to_dataframe


def default_layout(dimension):
    """Phase portrait of the first two coordinates, time series for 1-D orbits"""
    if dimension == 1:
        return [[('t', 'x0')]]
    return [[('x0', 'x1')]]


def plot_orbits(labeled_orbits, path_to_out_image, layout=None, coord_labels=None, plot_params=None):
    """
    Draws orbits on a grid of subplots.

    labeled_orbits : list of (PeriodicOrbit, label, plot kwargs) tuples
    layout : rows of (xvar, yvar) pairs naming the dataframe columns to plot
    """
    plot_params = {} if plot_params is None else plot_params
    dimension = labeled_orbits[0][0].points.shape[1]
    layout = default_layout(dimension) if layout is None else layout
    coord_labels = {} if coord_labels is None else coord_labels

    n_rows = len(layout)
    n_cols = max([len(lt) for lt in layout])

    fig = plt.figure(layout='constrained')
    title_params = dict(plot_params.get('title', {}))
    title_label = title_params.pop('label', None)
    if title_label is not None:
        fig.suptitle(title_label, **title_params)

    frames = [(orbit_to_dataframe(po), label, kwargs) for po, label, kwargs in labeled_orbits]

    for i, row in enumerate(layout):
        for j, var_names in enumerate(row):
            xvar, yvar = var_names
            ax = fig.add_subplot(n_rows, n_cols, i * n_cols + j + 1)
            ax.set_xlabel(coord_labels.get(xvar, xvar))
            ax.set_ylabel(coord_labels.get(yvar, yvar))

            for df, label, kwargs in frames:
                # explicit empty format string suppresses the data keyword warning
                ax.plot(xvar, yvar, '', data=df, label=label, **kwargs)
                ax.scatter(df[xvar].iloc[0], df[yvar].iloc[0], color='black', s=12)
            ax.legend()

    plt.savefig(path_to_out_image, facecolor='white', **plot_params.get('figure', {}))
    plt.close(fig)
    return path_to_out_image

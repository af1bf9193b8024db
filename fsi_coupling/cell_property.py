class CellProperty:
    """Per-cell data of the fluid: material viscosity and the FSI indicator.

    ``indicator`` is 1 for cells entirely covered by the solid ("artificial
    fluid") and 0 for pure fluid cells.
    """

    __slots__ = ("mu", "indicator")

    def __init__(self, mu, indicator=0):
        self.mu = mu
        self.indicator = indicator

    def get_mu(self):
        return self.mu

    def __repr__(self):
        return f"CellProperty(mu={self.mu!r}, indicator={self.indicator!r})"


class CellPropertyStore:
    """
    Mapping from cell index to the :class:`CellProperty` record owned by
    that cell.

    The store has to be re-initialised whenever the mesh is refined, since
    cell indices are not stable across refinement.
    """

    def __init__(self):
        self._data = {}

    def initialize(self, n_cells, mu):
        self._data = {c: CellProperty(mu) for c in range(n_cells)}

    def get_data(self, cell):
        try:
            return self._data[cell]
        except KeyError:
            raise KeyError(f"no cell property stored for cell {cell}") from None

    def indicators(self):
        """Indicator of every cell, in cell order."""
        return [self._data[c].indicator for c in sorted(self._data)]

    def __len__(self):
        return len(self._data)

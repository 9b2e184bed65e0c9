# tests/test_ui.py
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from config.models import SimulatorParameters
from simulation.engine import compute_budget
from visualization.charts import plot_capex_breakdown, plot_five_year_projection
import ui.main as app


def test_displayed_figures_are_closed(monkeypatch):
    shown = []
    monkeypatch.setattr(app.st, "pyplot", shown.append)
    results = compute_budget(SimulatorParameters())
    plt.close("all")

    for fig in (plot_capex_breakdown(results), plot_five_year_projection(results)):
        app._show(fig)
        assert not plt.fignum_exists(fig.number)

    assert len(shown) == 2
    assert plt.get_fignums() == []

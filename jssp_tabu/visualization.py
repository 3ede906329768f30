import logging
import os
from typing import Optional

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402

from jssp_tabu.solution import Solution  # noqa: E402

logger = logging.getLogger("jssp.visualization")


def _ensure_dir(path: str):
    if path:
        os.makedirs(path, exist_ok=True)


def plot_gantt(
    solution: Solution,
    save_path: str,
    algo_name: str = "tabu",
    show_legend: Optional[bool] = None,
) -> str:
    """Render a machine Gantt chart of ``solution`` at its earliest start times.

    Improvements:
    - Uses constrained_layout to reduce layout warnings.
    - Disables legend automatically for many jobs unless forced.
    - Adaptive figure size based on number of machines and jobs.
    """
    data = solution.data
    m = data.machines_number
    n = data.jobs_number
    starts = solution.earliest_start_times()

    base_w, base_h = 10, 0.5 * m + 2
    fig, ax = plt.subplots(
        figsize=(min(base_w + n * 0.05, 18), min(base_h, 16)),
        constrained_layout=True,
    )
    cmap = matplotlib.colormaps["tab20"]
    colors = [cmap(j % 20) for j in range(n)]
    for j, job in enumerate(data.jobs):
        for op, start in zip(job, starts[j]):
            ax.barh(
                op.machine,
                op.duration,
                left=start,
                height=0.8,
                color=colors[j],
                alpha=0.85,
                edgecolor="black",
                linewidth=0.6,
            )
    ax.set_xlabel("Time", fontsize=12)
    ax.set_ylabel("Machine", fontsize=12)
    ax.set_title(f"{algo_name} - Cmax = {solution.cost:g}", fontsize=14, fontweight="bold")
    ax.set_yticks(range(m))
    ax.set_yticklabels([f"M{i}" for i in range(m)])
    ax.grid(True, alpha=0.25, axis="x", linestyle="--", linewidth=0.7)
    ax.set_ylim(-0.5, m - 0.5)

    if show_legend is None:
        show_legend = n <= 40
    if show_legend:
        legend_elements = [
            plt.Rectangle(
                (0, 0), 1, 1, facecolor=colors[j], alpha=0.85, edgecolor="black", label=f"Job {j}"
            )
            for j in range(n)
        ]
        ax.legend(
            handles=legend_elements,
            bbox_to_anchor=(1.02, 1),
            loc="upper left",
            borderaxespad=0.0,
            fontsize=8,
            frameon=False,
            ncol=1 if n <= 25 else 2,
        )

    _ensure_dir(os.path.dirname(save_path))
    fig.savefig(save_path, dpi=180)
    plt.close(fig)
    logger.info("Gantt chart saved as: %s", save_path)
    return save_path


def plot_iteration_progress(
    histories: dict[str, list[float]],
    save_path: str,
    title: str = "Tabu search progress",
) -> str:
    """Plot current cost per iteration for one or more runs on one figure."""
    fig, ax = plt.subplots(figsize=(10, 6), constrained_layout=True)
    for label, values in histories.items():
        ax.plot(range(len(values)), values, label=label, linewidth=1.2)
        if values:
            ax.annotate(
                f"{min(values):g}",
                xy=(values.index(min(values)), min(values)),
                xytext=(6, -10),
                textcoords="offset points",
                fontsize=9,
                bbox=dict(boxstyle="round,pad=0.2", facecolor="white", alpha=0.55),
            )
    ax.set_xlabel("Iteration", fontsize=12)
    ax.set_ylabel("Cmax", fontsize=12)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.grid(True, alpha=0.25, linestyle="--", linewidth=0.7)
    ax.legend(loc="center left", bbox_to_anchor=(1.02, 0.5), frameon=False, fontsize=9)
    _ensure_dir(os.path.dirname(save_path))
    fig.savefig(save_path, dpi=180)
    plt.close(fig)
    logger.info("Progress plot saved as: %s", save_path)
    return save_path

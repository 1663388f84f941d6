import logging
import os

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

logger = logging.getLogger(__name__)


def plot_price_distribution(prices, gamma_fit, output_dir, filename='price_distribution.png'):
    """Histogram of prices with the fitted gamma density overlaid"""
    sns.set(style="whitegrid")
    prices = np.asarray(prices, dtype=float)

    plt.figure(figsize=(12, 6))
    sns.histplot(prices, bins=50, stat='density', alpha=0.6)

    x = np.linspace(0, prices.max(), 500)
    plt.plot(x, gamma_fit.pdf(x), color='red', linewidth=2,
             label=f'Gamma fit (shape={gamma_fit.shape:.2f}, scale={gamma_fit.scale:.1f})')
    plt.axvline(gamma_fit.mean, color='red', linestyle='dashed', linewidth=1)

    plt.title('Listing Price Distribution')
    plt.xlabel('Price ($)')
    plt.ylabel('Density')
    plt.legend()
    plt.tight_layout()

    viz_path = os.path.join(output_dir, filename)
    plt.savefig(viz_path)
    plt.close()
    logger.info(f"Price distribution visualization saved to '{viz_path}'")
    return viz_path


def plot_ci_report(frame, group_label, title, output_dir, filename, top_n=30):
    """
    Horizontal error-bar chart of a ranked confidence-interval table

    Parameters:
    -----------
    frame : DataFrame
        Output of report_to_frame (already sorted, best first)
    group_label : str
        Column holding the group names
    title : str
        Chart title
    output_dir : str
        Directory to save the chart in
    filename : str
        Chart file name
    top_n : int, default=30
        Only the first top_n groups are drawn
    """
    if len(frame) == 0:
        logger.warning(f"Nothing to plot for '{title}'")
        return None

    sns.set(style="whitegrid")
    plot_df = frame.head(top_n).iloc[::-1]
    labels = plot_df[group_label].astype(str)
    # point estimate can sit outside its percentile interval for tiny samples
    errors = np.clip(np.vstack([
        plot_df['point_estimate'] - plot_df['lower_bound'],
        plot_df['upper_bound'] - plot_df['point_estimate'],
    ]), 0, None)
    colors = ['orange' if small else 'steelblue' for small in plot_df['small_sample']]

    plt.figure(figsize=(12, max(4, 0.35 * len(plot_df))))
    positions = np.arange(len(plot_df))
    plt.errorbar(plot_df['point_estimate'], positions, xerr=errors, fmt='none', ecolor='gray', capsize=3)
    plt.scatter(plot_df['point_estimate'], positions, c=colors, zorder=3)
    plt.yticks(positions, labels)

    plt.title(title, fontsize=14)
    plt.xlabel('Mean price ($) with bootstrap CI', fontsize=12)
    plt.ylabel(group_label, fontsize=12)
    plt.tight_layout()

    viz_path = os.path.join(output_dir, filename)
    plt.savefig(viz_path)
    plt.close()
    logger.info(f"Saved '{title}' chart to '{viz_path}'")
    return viz_path

"""
Backtest & Visualization for Ebb
================================
This script replays an event log through the predictor, calculates error
metrics, and plots predicted against actual period starts.
"""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from sklearn.metrics import mean_absolute_error, mean_squared_error

from ebb_forecast.backtest import backtest, summarize


# Set style for better-looking plots
sns.set_style("whitegrid")
plt.rcParams['figure.figsize'] = (14, 8)
plt.rcParams['font.size'] = 11


# ============================================================================
# METRICS
# ============================================================================

def calculate_metrics(frame):
    """Calculate error metrics on predicted vs actual cycle lengths."""
    y_true = frame['actual_cycle_length'].to_numpy(dtype=float)
    y_pred = frame['predicted_cycle_length'].to_numpy(dtype=float)

    metrics = summarize(frame)
    metrics['cycle_length_MAE'] = float(mean_absolute_error(y_true, y_pred))
    metrics['cycle_length_RMSE'] = float(np.sqrt(mean_squared_error(y_true, y_pred)))

    by_confidence = frame.groupby('confidence')['error_days'].apply(lambda s: float(s.abs().mean()))
    metrics['MAE_by_confidence'] = by_confidence.to_dict()
    return metrics


# ============================================================================
# VISUALIZATION
# ============================================================================

def plot_predictions_comparison(frame, save_path):
    """
    Plot predicted vs actual cycle lengths and the start-date error distribution.
    """
    fig, axes = plt.subplots(1, 2, figsize=(16, 6))

    y_true = frame['actual_cycle_length']
    y_pred = frame['predicted_cycle_length']

    ax = axes[0]
    ax.scatter(y_true, y_pred, alpha=0.6, s=80, edgecolors='k', linewidth=0.5)
    ax.plot([y_true.min(), y_true.max()], [y_true.min(), y_true.max()],
            'r--', lw=2, label='Perfect Prediction')
    ax.set_xlabel('Actual Cycle Length (days)', fontsize=12, fontweight='bold')
    ax.set_ylabel('Predicted Cycle Length (days)', fontsize=12, fontweight='bold')
    ax.set_title('Predicted vs Actual', fontsize=14, fontweight='bold')
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    sns.histplot(frame['error_days'], discrete=True, ax=ax)
    ax.axvline(x=0, color='r', linestyle='--', lw=2)
    ax.set_xlabel('Start Error (days, positive = late)', fontsize=12, fontweight='bold')
    ax.set_title('Start Date Error', fontsize=14, fontweight='bold')

    plt.tight_layout()
    plt.savefig(save_path, dpi=300, bbox_inches='tight')
    print(f"Saved: {save_path}")
    plt.close()


def plot_time_series_predictions(frame, save_path):
    """
    Plot cycle lengths over time, actual against predicted.
    """
    fig, ax = plt.subplots(1, 1, figsize=(16, 6))

    dates = pd.to_datetime(frame['actual_start'])
    ax.plot(dates, frame['actual_cycle_length'], 'o-', label='Actual',
            linewidth=2, markersize=8, color='black')
    ax.plot(dates, frame['predicted_cycle_length'], 's-', label='Predicted',
            linewidth=2, markersize=6, color='blue', alpha=0.7)
    ax.set_xlabel('Period Start', fontsize=12, fontweight='bold')
    ax.set_ylabel('Cycle Length (days)', fontsize=12, fontweight='bold')
    ax.set_title('Backtest: Time Series', fontsize=14, fontweight='bold')
    ax.legend(loc='best')
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(save_path, dpi=300, bbox_inches='tight')
    print(f"Saved: {save_path}")
    plt.close()


def main():
    parser = argparse.ArgumentParser(description='Backtest the Ebb predictor on an event log')
    parser.add_argument('--input', '-i', required=True, help='Path to CSV event log')
    parser.add_argument('--output', '-o', default='results', help='Directory for metrics and plots')
    args = parser.parse_args()

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Input file not found: {input_path}", file=sys.stderr)
        sys.exit(1)

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    print("="*70)
    print("EBB BACKTEST")
    print("="*70)

    logs = pd.read_csv(input_path, dtype={'date': str, 'type': str, 'value': str})
    frame = backtest(logs)
    print(f"\nReplayed {len(frame)} periods from {input_path}")

    if frame.empty:
        print("Not enough history to backtest.")
        sys.exit(1)

    metrics = calculate_metrics(frame)
    metrics['evaluated_at'] = datetime.now().isoformat()

    print(f"\n  MAE (start):  {metrics['MAE']:.2f} days")
    print(f"  RMSE (start): {metrics['RMSE']:.2f} days")
    print(f"  Hit rate:     {metrics['hit_rate']:.1%}")

    metrics_path = output_dir / 'metrics.json'
    with open(metrics_path, 'w') as f:
        json.dump(metrics, f, indent=2)
    print(f"\nSaved: {metrics_path}")

    frame.to_csv(output_dir / 'backtest.csv', index=False)
    plot_predictions_comparison(frame, output_dir / 'predictions_comparison.png')
    plot_time_series_predictions(frame, output_dir / 'time_series.png')


if __name__ == '__main__':
    main()

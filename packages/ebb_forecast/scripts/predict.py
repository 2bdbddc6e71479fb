"""
Prediction Interface for Ebb
============================
This script prints upcoming period predictions for an exported event log.
"""

import argparse
import json
import sys
from pathlib import Path

from ebb_forecast.predictor import CyclePredictor


def main():
    """Command line interface for predictions."""
    parser = argparse.ArgumentParser(
        description='Predict upcoming periods from an Ebb event log',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example CSV format (logs.csv):
    date,type,value
    2024-01-03,period,medium
    2024-01-04,period,heavy
    2024-01-20,cramps,light
    ...

Example usage:
    python predict.py --input logs.csv
    python predict.py --input logs.csv --json
        """
    )

    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Path to CSV file with the event log'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the raw prediction as JSON'
    )

    args = parser.parse_args()

    if not Path(args.input).exists():
        print(f"Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    predictor = CyclePredictor(verbose=not args.json)
    result = predictor.predict_from_csv(args.input)

    if args.json:
        print(json.dumps(result.to_dict() if result else None, indent=2))
        return result

    if result is None:
        print("\nLog at least three periods to get a prediction.")
        return None

    print("\n" + "="*70)
    print("EBB PERIOD PREDICTION")
    print("="*70)
    print(f"\nAverage cycle length: {result.avg_cycle_length} days (±{result.std_dev})")
    print(f"Cycles found: {len(result.cycles)}")

    print("\nUpcoming periods:")
    for prediction in result.predictions:
        print(
            f"  {prediction.start_date} → {prediction.end_date}"
            f"  [{prediction.confidence.value}]"
        )

    print("\n" + "="*70)

    return result


if __name__ == '__main__':
    main()

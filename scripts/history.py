"""Print the payment history."""

import argparse
import sys
from pathlib import Path

# Add parent directory to path to import facepay modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from facepay.config import CURRENCY, DATA_DIR
from facepay.history import PaymentHistory
from facepay.storage import JsonFileStorage


def main():
    parser = argparse.ArgumentParser(description="Show recorded payments")
    parser.add_argument("--wallet", help="Only show payments to this wallet")
    parser.add_argument("--data-dir", default=str(DATA_DIR), help="Directory for saved state")
    args = parser.parse_args()

    history = PaymentHistory(JsonFileStorage(args.data_dir))
    payments = history.load()
    if args.wallet:
        payments = [p for p in payments if p.identifier == args.wallet]

    if not payments:
        print("No payments recorded.")
        return

    print(f"=== Payment History ({len(payments)}) ===")
    total = 0.0
    for p in payments:
        print(f"{p.timestamp}  {p.identifier}  {p.amount:g} {CURRENCY}")
        total += p.amount
    print(f"\nTotal: {total:g} {CURRENCY}")


if __name__ == "__main__":
    main()

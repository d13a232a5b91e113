"""
Ledger Verification Script

Checks the Excel order ledger written by the Celery worker.
Run from project root: python scripts/verify.py

Author: UaiFood Team
Version: 1.0.0
"""

import os
import sys
from datetime import datetime

import pandas as pd

EXCEL_FILE = os.path.join("data", "orders.xlsx")
REQUIRED_COLUMNS = ["order_id", "event", "client_id", "order_status", "total_amount"]


def verify_ledger(path: str = EXCEL_FILE) -> bool:
    """Verify ledger integrity after a simulation run."""

    print("=" * 60)
    print("🔍 ORDER LEDGER VERIFICATION REPORT")
    print("=" * 60)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"📄 File: {path}")
    print("=" * 60)

    if not os.path.exists(path):
        print("\n❌ Ledger file not found!")
        print("   Run the simulation first: python scripts/simulate.py")
        return False

    try:
        df = pd.read_excel(path, engine="openpyxl")
        print(f"\n✅ File loaded successfully!")
    except Exception as e:
        print(f"\n❌ Could not read ledger: {e}")
        return False

    print(f"\n📊 STATISTICS:")
    print(f"   Total Rows: {len(df)}")
    print(f"   Columns: {len(df.columns)}")

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        print(f"\n⚠️ Missing Columns: {missing}")
        return False
    print(f"\n✅ All required columns present")

    # A given order is created exactly once; status changes may repeat
    created = df[df["event"] == "created"]
    duplicates = created["order_id"].duplicated().sum()
    if duplicates > 0:
        print(f"\n⚠️ {duplicates} orders exported as 'created' more than once!")
    else:
        print(f"✅ No duplicate creation rows ({len(created)} orders)")

    print(f"\n📌 EVENTS:")
    for event, count in df["event"].value_counts().items():
        print(f"   {event}: {count}")

    if len(created) > 0:
        totals = pd.to_numeric(created["total_amount"], errors="coerce")
        print(f"\n💰 REVENUE (creation rows):")
        print(f"   Total: R$ {totals.sum():.2f}")
        print(f"   Average: R$ {totals.mean():.2f}")

    print(f"\n📋 RECENT ROWS:")
    print("-" * 60)
    if len(df) > 0:
        print(df[REQUIRED_COLUMNS].tail(5).to_string(index=False))

    print("\n" + "=" * 60)
    print("✅ VERIFICATION COMPLETE")
    print("=" * 60)

    return duplicates == 0


if __name__ == "__main__":
    ok = verify_ledger()
    sys.exit(0 if ok else 1)

"""
Order Load Simulation Script

Registers a batch of clients, gives each one an address and fires their
orders at the API concurrently. Useful to check the Celery ledger keeps up.
Run from project root: python scripts/simulate.py

Requires at least one menu item (create it through the admin routes first).

Author: UaiFood Team
Version: 1.0.0
"""

import asyncio
import sys
import random
import time
import argparse
from datetime import datetime
from typing import Any, Optional

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:3001"
TOTAL_ORDERS = 50

FIRST_NAMES = ["Maria", "Joao", "Ana", "Pedro", "Lucas", "Julia", "Rafael", "Camila", "Bruno", "Larissa"]
LAST_NAMES = ["Silva", "Souza", "Oliveira", "Santos", "Pereira", "Costa", "Almeida", "Ferreira"]
STREETS = ["Av. Rondon Pacheco", "Rua Goias", "Av. Joao Naves", "Rua Tiradentes", "Av. Floriano Peixoto"]
DISTRICTS = ["Centro", "Santa Monica", "Tibery", "Martins", "Fundinho"]
PAYMENT_METHODS = ["CASH", "DEBIT", "CREDIT", "PIX"]


def generate_random_client(order_num: int) -> dict[str, Any]:
    """Generate a registration payload with a unique email."""
    first = random.choice(FIRST_NAMES)
    last = random.choice(LAST_NAMES)
    stamp = int(time.time())
    return {
        "name": f"{first} {last}",
        "email": f"{first.lower()}.{last.lower()}.{stamp}.{order_num}@example.com",
        "password": "simulate123",
        "phone": f"349{random.randint(10000000, 99999999)}",
        "accepts_terms": True,
    }


def generate_random_address() -> dict[str, str]:
    return {
        "street": random.choice(STREETS),
        "number": str(random.randint(1, 3000)),
        "district": random.choice(DISTRICTS),
        "city": "Uberlandia",
        "state": "MG",
        "zip_code": f"384{random.randint(10000, 99999)}",
    }


def generate_random_lines(menu: list[dict]) -> list[dict[str, int]]:
    """Pick 1-4 distinct menu items with random quantities."""
    picks = random.sample(menu, k=min(len(menu), random.randint(1, 4)))
    return [{"item_id": item["id"], "quantity": random.randint(1, 3)} for item in picks]


# =============================================================================
# CLIENT FLOW
# =============================================================================

async def place_client_order(
    client: httpx.AsyncClient,
    order_num: int,
    menu: list[dict],
) -> dict[str, Any]:
    """Register, log in, add an address and place one order."""
    start_time = time.time()
    user = generate_random_client(order_num)

    try:
        response = await client.post(f"{API_BASE_URL}/api/users", json=user, timeout=30.0)
        if response.status_code != 201:
            return _failure(order_num, start_time, f"register: {response.text}")

        response = await client.post(
            f"{API_BASE_URL}/api/users/login",
            json={"email": user["email"], "password": user["password"]},
            timeout=30.0,
        )
        if response.status_code != 200:
            return _failure(order_num, start_time, f"login: {response.text}")
        headers = {"Authorization": f"Bearer {response.json()['token']}"}

        response = await client.post(
            f"{API_BASE_URL}/api/addresses",
            json=generate_random_address(),
            headers=headers,
            timeout=30.0,
        )
        if response.status_code != 201:
            return _failure(order_num, start_time, f"address: {response.text}")
        address_id = response.json()["id"]

        response = await client.post(
            f"{API_BASE_URL}/api/orders",
            json={
                "payment_method": random.choice(PAYMENT_METHODS),
                "address_id": address_id,
                "items": generate_random_lines(menu),
            },
            headers=headers,
            timeout=30.0,
        )
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 201:
            data = response.json()
            return {
                "order_num": order_num,
                "success": True,
                "order_id": data.get("id"),
                "total": float(data.get("total_amount", 0)),
                "time": elapsed,
            }
        return _failure(order_num, start_time, f"order: {response.text}")
    except httpx.HTTPError as e:
        return _failure(order_num, start_time, str(e))


def _failure(order_num: int, start_time: float, error: str) -> dict[str, Any]:
    return {
        "order_num": order_num,
        "success": False,
        "error": error[:100],
        "time": round(time.time() - start_time, 3),
    }


async def fetch_menu(client: httpx.AsyncClient) -> Optional[list[dict]]:
    response = await client.get(f"{API_BASE_URL}/api/items", timeout=30.0)
    if response.status_code != 200:
        print(f"   ❌ Could not load menu: {response.text[:100]}")
        return None
    return response.json()


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(num_orders: int = TOTAL_ORDERS) -> dict[str, Any]:
    """
    Run the load simulation.

    Args:
        num_orders: Number of clients, each placing one order
    """
    print("=" * 70)
    print("🔥 ORDER LOAD SIMULATION")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient() as client:
        menu = await fetch_menu(client)
        if not menu:
            print("\n❌ The menu is empty. Create categories and items first.")
            return {"total": num_orders, "successful": 0, "failed": num_orders, "results": []}

        print(f"\n🚀 Firing {num_orders} client flows against {len(menu)} menu items...\n")
        tasks = [place_client_order(client, i + 1, menu) for i in range(num_orders)]
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)

    print(f"\n✅ Successful Orders: {len(successful)}/{num_orders}")
    print(f"❌ Failed Orders: {len(failed)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        total_revenue = sum(r.get("total", 0) for r in successful)

        print(f"\n📈 Performance Metrics:")
        print(f"   Average Flow Time: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   💰 Total Revenue: R$ {total_revenue:.2f}")

    if failed:
        print(f"\n⚠️  Failed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("\n" + "=" * 70)
    print("🔍 VERIFICATION STEPS")
    print("=" * 70)
    print("1. Check the Celery terminal - all export tasks should complete")
    print("2. Run: python scripts/verify.py")
    print("3. Open data/orders.xlsx to inspect the ledger")
    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


async def check_health() -> bool:
    """Pre-flight check before the load run."""
    async with httpx.AsyncClient() as client:
        print("\n🧪 Health Check...")
        try:
            response = await client.get(f"{API_BASE_URL}/health", timeout=10.0)
        except httpx.HTTPError as e:
            print(f"   ❌ API unreachable: {e}")
            return False

        if response.status_code != 200:
            print(f"   ❌ Failed: {response.text}")
            return False

        data = response.json()
        print(f"   ✅ Status: {data.get('status')}")
        print(f"   Database: {data.get('database')}")
        return data.get("status") == "operational"


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order Load Simulation")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--skip-health", action="store_true", help="Skip the health check")
    args = parser.parse_args()

    if not args.skip_health and not asyncio.run(check_health()):
        print("\n❌ Pre-flight check failed. Is the API running?")
        sys.exit(1)

    summary = asyncio.run(run_simulation(num_orders=args.orders))
    sys.exit(0 if summary["failed"] == 0 else 1)

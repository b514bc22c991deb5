#!/usr/bin/env python3
"""
Seed script: registers donors and lists products through the API (no direct DB).
Run with the API up:
  python scripts/seed_data.py
  python scripts/seed_data.py --users 20 --products-per-user 5 --conclude-ratio 0.2
"""

import argparse
import random
import sys

import httpx

API_BASE = "http://localhost:8000/api/v1"

NAMES = [
    "Wooden chair", "Bookshelf", "Winter coat", "Baby stroller", "Desk lamp",
    "Microwave", "Bicycle", "Sofa", "Kitchen table", "Textbooks (calculus)",
    "Crib", "Electric fan", "Rice cooker", "Backpack", "Bed frame",
]
STATES = ["new", "like new", "used", "needs repair"]
DESCRIPTIONS = [
    "Pick up only, ground floor.",
    "Small scratches, works fine.",
    "Smoke-free home.",
    "Used for one semester.",
    "All parts included.",
]


def random_product() -> dict:
    name = random.choice(NAMES)
    slug = name.lower().replace(" ", "-")
    return {
        "name": name,
        "description": random.choice(DESCRIPTIONS),
        "state": random.choice(STATES),
        "purchased_at": f"{random.randint(2012, 2024)}-{random.randint(1, 12):02d}-{random.randint(1, 28):02d}",
        "images": [{"filename": f"{slug}-{i}.jpg"} for i in range(random.randint(1, 3))],
    }


def main():
    ap = argparse.ArgumentParser(description="Seed donors and products via API")
    ap.add_argument("--users", type=int, default=10, help="Number of donors to register")
    ap.add_argument("--products-per-user", type=int, default=5)
    ap.add_argument("--conclude-ratio", type=float, default=0.2, help="Share of products to mark donated")
    ap.add_argument("--base-url", default=API_BASE, help="API base URL")
    args = ap.parse_args()

    created = concluded = 0
    errors = []

    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        for i in range(args.users):
            email, password = f"donor{i + 1}@example.com", "password123"
            r = client.post("/users/register", json={"email": email, "password": password, "full_name": f"Donor {i + 1}"})
            if r.status_code not in (201, 409):
                errors.append(f"Register {email}: {r.status_code} {r.text[:80]}")
                continue
            r = client.post("/users/login", json={"email": email, "password": password})
            if r.status_code != 200:
                errors.append(f"Login {email}: {r.status_code}")
                continue
            headers = {"Authorization": f"Bearer {r.json()['access_token']}"}

            for _ in range(args.products_per_user):
                r = client.post("/products", headers=headers, json=random_product())
                if r.status_code != 201:
                    errors.append(f"Product {email}: {r.status_code} {r.text[:80]}")
                    continue
                created += 1
                if random.random() < args.conclude_ratio:
                    r = client.patch(f"/products/{r.json()['id']}/conclude", headers=headers)
                    if r.status_code == 200:
                        concluded += 1
                    else:
                        errors.append(f"Conclude {email}: {r.status_code}")
            print(f"  {email}: total products so far {created}")

    print(f"\nDone. Products created: {created}, donations concluded: {concluded}")
    if errors:
        print(f"Errors ({len(errors)}):")
        for e in errors[:15]:
            print("  ", e)
        sys.exit(1)


if __name__ == "__main__":
    main()

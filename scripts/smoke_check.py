#!/usr/bin/env python3
"""
Smoke check contra un servidor en ejecución.

- CORS: el frontend configurado es aceptado y otros orígenes no
- Ciclo de venta: alta de item, venta abierta, edición, pago, reversión
  y borrado, verificando el stock en cada paso

Uso: python scripts/smoke_check.py [base_url]
"""

import uuid
import requests
from typing import Dict, List, Optional

def check_cors(base_url: str) -> List[Dict]:
    """Probar preflight y request real para varios orígenes"""

    # (origin, should_be_allowed)
    test_origins = [
        ("http://localhost:5173", True),
        ("https://malicious-site.com", False),
        ("http://evil.com", False),
        (None, True),  # Sin origen (llamada directa)
    ]

    results = []
    for origin, should_be_allowed in test_origins:
        name = f"CORS origin: {origin or 'None (Direct)'}"
        headers = {}
        if origin:
            headers["Origin"] = origin

        try:
            requests.options(
                f"{base_url}/api/health",
                headers={**headers, "Access-Control-Request-Method": "POST"},
                timeout=10
            )
            response = requests.get(f"{base_url}/api/health", headers=headers, timeout=10)
        except requests.exceptions.RequestException as e:
            results.append({"name": name, "status": "ERROR", "message": f"Request failed: {e}"})
            continue

        allow_origin = response.headers.get("Access-Control-Allow-Origin")
        allowed = allow_origin == origin or (origin is None and response.status_code == 200)

        results.append({
            "name": name,
            "status": "PASS" if allowed == should_be_allowed else "FAIL",
            "message": f"Access-Control-Allow-Origin: {allow_origin}"
        })

    return results

def _stock_of(base_url: str, item_name: str) -> Optional[int]:
    items = requests.get(f"{base_url}/api/inventory", timeout=10).json()
    for item in items:
        if item["item_name"] == item_name:
            return item["stock"]
    return None

def _step(name: str, ok: bool, message: str) -> Dict:
    return {"name": name, "status": "PASS" if ok else "FAIL", "message": message}

def check_sale_lifecycle(base_url: str) -> List[Dict]:
    """Recorrer el ciclo de vida completo de una venta sobre un item nuevo"""

    suffix = uuid.uuid4().hex[:8]
    item_name = f"smoke-item-{suffix}"
    invoice = f"SMOKE-{suffix}"
    results = []

    try:
        requests.post(
            f"{base_url}/api/inventory",
            json={"item_name": item_name, "price": 10, "stock": 10},
            timeout=10
        ).raise_for_status()

        create = requests.post(
            f"{base_url}/api/open-sales",
            json={
                "invoice_number": invoice,
                "items": [
                    {"type": "item", "item_name": item_name, "qty": 5, "price": 10},
                    {"type": "service", "service_name": "Smoke service", "price": 1}
                ]
            },
            timeout=10
        )
        stock = _stock_of(base_url, item_name)
        results.append(_step("Create open sale", create.status_code == 201 and stock == 5, f"stock={stock}"))
        sale_id = create.json()["id"]

        edit = requests.put(
            f"{base_url}/api/open-sales/{sale_id}",
            json={"items": [{"type": "item", "item_name": item_name, "qty": 8}]},
            timeout=10
        )
        stock = _stock_of(base_url, item_name)
        results.append(_step("Edit open sale 5 -> 8", edit.status_code == 200 and stock == 2, f"stock={stock}"))

        too_much = requests.put(
            f"{base_url}/api/open-sales/{sale_id}",
            json={"items": [{"type": "item", "item_name": item_name, "qty": 50}]},
            timeout=10
        )
        stock = _stock_of(base_url, item_name)
        results.append(_step("Reject insufficient stock", too_much.status_code == 400 and stock == 2, f"stock={stock}"))

        pay = requests.post(f"{base_url}/api/pay-sale/{sale_id}", json={"paid_using": "cash"}, timeout=10)
        closed_id = pay.json().get("closed_sale_id")
        results.append(_step("Pay sale", pay.status_code == 200 and _stock_of(base_url, item_name) == 2, f"closed_id={closed_id}"))

        revert = requests.post(f"{base_url}/api/revert-sale/{closed_id}", timeout=10)
        reopened_id = revert.json().get("open_sale_id")
        results.append(_step("Revert sale", revert.status_code == 200, f"open_id={reopened_id}"))

        delete = requests.delete(f"{base_url}/api/open-sales/{reopened_id}", timeout=10)
        stock = _stock_of(base_url, item_name)
        results.append(_step("Delete open sale restocks", delete.status_code == 200 and stock == 10, f"stock={stock}"))

    except (requests.exceptions.RequestException, KeyError, ValueError) as e:
        results.append({"name": "Sale lifecycle", "status": "ERROR", "message": str(e)})

    return results

def print_results(base_url: str, results: List[Dict]):
    print("🔎 Smoke Check Results")
    print("=" * 50)
    print(f"API Base URL: {base_url}")
    print()

    for result in results:
        status_emoji = "✅" if result["status"] == "PASS" else "❌" if result["status"] == "FAIL" else "⚠️"
        print(f"{status_emoji} {result['name']}")
        print(f"   {result['message']}")

    failed = sum(1 for r in results if r["status"] != "PASS")
    print()
    print(f"Total: {len(results)} - Failed: {failed}")

if __name__ == "__main__":
    import sys

    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:5001"

    print(f"🧪 Smoke check for: {base_url}\n")
    results = check_cors(base_url) + check_sale_lifecycle(base_url)
    print_results(base_url, results)

    if any(r["status"] != "PASS" for r in results):
        sys.exit(1)

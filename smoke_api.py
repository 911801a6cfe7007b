"""
Manual smoke check against a running server (see run_server.py).

Usage:
    python smoke_api.py [base_url]
"""
import sys

import requests

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://127.0.0.1:8001"


def check_health():
    print("--- Health ---")
    try:
        res = requests.get(f"{BASE_URL}/health")
        print(f"Status: {res.status_code}")
        print(f"Response: {res.json()}")
    except Exception as e:
        print(f"Error: {e}")


def check_passwords():
    print("\n--- Password strength ---")
    for pw in ["", "password", "Tr0ub4dor&3", "correct horse battery staple"]:
        try:
            res = requests.post(f"{BASE_URL}/api/password-strength", json={"password": pw})
            if res.status_code != 200:
                print(f"Error: {res.status_code} {res.text}")
                continue
            report = res.json()
            label = (report.get("range") or {}).get("label")
            print(f" - len={len(pw):>2} | entropy={report['entropy']:>3} | {label} | inDict:{report['in_dictionary']}")
        except Exception as e:
            print(f"Error: {e}")


def check_logs():
    print("\n--- Recent logs ---")
    try:
        res = requests.get(f"{BASE_URL}/api/logs", params={"limit": 5})
        for entry in res.json():
            print(f" {entry['message']}")
    except Exception as e:
        print(f"Error: {e}")


if __name__ == "__main__":
    check_health()
    check_passwords()
    check_logs()

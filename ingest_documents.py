#!/usr/bin/env python3
"""
Upload extracted-document JSON files to the MRV API and run a verification.

Accepts a single .json file (one object or a list of objects), a .jsonl file
(one object per line), or a directory of such files.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import requests

API_BASE = "http://localhost:8000"


def load_extractions(path: Path) -> List[Dict[str, Any]]:
    """Read ExtractedData payloads from a file or directory, in sorted file order."""
    if path.is_dir():
        payloads = []
        for child in sorted(path.iterdir()):
            if child.suffix in (".json", ".jsonl"):
                payloads.extend(load_extractions(child))
        return payloads

    text = path.read_text(encoding="utf-8")
    if path.suffix == ".jsonl":
        return [json.loads(line) for line in text.splitlines() if line.strip()]

    data = json.loads(text)
    if isinstance(data, list):
        return data
    return [data]


def upload_document(api_base: str, payload: Dict[str, Any], params: Dict[str, str]) -> Dict[str, Any]:
    response = requests.post(f"{api_base}/documents/", json=payload, params=params, timeout=30)
    response.raise_for_status()
    return response.json()


def run_verification(api_base: str, params: Dict[str, str], include_iot: bool) -> Dict[str, Any]:
    response = requests.post(
        f"{api_base}/verifications/",
        json={"include_iot": include_iot},
        params=params,
        timeout=30
    )
    response.raise_for_status()
    return response.json()


def main(argv=None) -> bool:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", type=Path, help="JSON/JSONL file or directory")
    parser.add_argument("--user-id", help="Owner user id")
    parser.add_argument("--session-id", help="Owner anonymous session id")
    parser.add_argument("--api", default=API_BASE, help=f"API base URL (default {API_BASE})")
    parser.add_argument("--iot", action="store_true", help="Apply the metered efficiency reduction")
    parser.add_argument("--no-verify", action="store_true", help="Upload only")
    args = parser.parse_args(argv)

    if not args.user_id and not args.session_id:
        parser.error("one of --user-id or --session-id is required")
    if not args.path.exists():
        print(f"❌ File not found: {args.path}")
        return False

    params = {"user_id": args.user_id} if args.user_id else {"session_id": args.session_id}
    payloads = load_extractions(args.path)
    print(f"📖 Loaded {len(payloads)} extracted documents from {args.path}")

    try:
        requests.get(f"{args.api}/health/", timeout=5).raise_for_status()
    except requests.RequestException as e:
        print(f"❌ API not reachable at {args.api}: {e}")
        print("   Start the API with: uvicorn main:app --reload")
        return False

    success_count = 0
    fail_count = 0
    for index, payload in enumerate(payloads, start=1):
        try:
            result = upload_document(args.api, payload, params)
        except requests.RequestException as e:
            print(f"  ❌ Document {index} rejected: {e}")
            fail_count += 1
            continue
        emissions = result.get("emissions", [])
        print(f"  ✅ Document {result['document']['id']}: {len(emissions)} emission records")
        success_count += 1

    print(f"Uploaded: {success_count}  Failed: {fail_count}")

    if args.no_verify or success_count == 0:
        return success_count > 0

    report = run_verification(args.api, params, args.iot)
    credits = report["creditEligibility"]
    print(
        f"🔎 Verification {report['id']}: {report['status']} "
        f"(score {report['score']:.2f}, grade {credits['qualityGrade']}, "
        f"{credits['eligibleCredits']} credits, carry {credits['carryForward']:.3f} t)"
    )
    for flag in report["flags"]:
        print(f"   ⚠️  {flag}")
    return True


if __name__ == '__main__':
    try:
        success = main()
        sys.exit(0 if success else 1)
    except Exception as e:
        print(f"❌ Fatal error: {e}")
        sys.exit(1)

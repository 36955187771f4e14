import argparse
import re
import sys
from pathlib import Path
from typing import Dict

import requests

FILENAME_PATTERN = re.compile(r'filename="([^"]+)"')


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch the redirect, flyer and QR code of a store from a running server."
    )
    parser.add_argument("place_id", help="Google place ID of the store.")
    parser.add_argument(
        "--host",
        default="http://127.0.0.1:8080",
        help="Server host (default: http://127.0.0.1:8080).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory for the downloaded PDF and PNG (default: current directory).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the URLs instead of sending requests.",
    )
    return parser.parse_args(argv)


def store_urls(host: str, place_id: str) -> Dict[str, str]:
    base = f"{host.rstrip('/')}/store/{place_id}"
    return {
        "redirect": base,
        "pdf": f"{base}/pdf",
        "qr": f"{base}/qr",
    }


def flyer_name(response: requests.Response, place_id: str) -> str:
    match = FILENAME_PATTERN.search(response.headers.get("Content-Disposition", ""))
    if match:
        return match.group(1)
    return f"{place_id}.pdf"


def fetch(place_id: str, host: str, output_dir: Path) -> Dict[str, Path]:
    urls = store_urls(host, place_id)
    saved: Dict[str, Path] = {}

    response = requests.get(urls["redirect"], allow_redirects=False, timeout=10)
    print(f"Redirect: {response.status_code} -> {response.headers.get('Location')}")

    response = requests.get(urls["pdf"], timeout=10)
    print(f"PDF: {response.status_code}")
    response.raise_for_status()
    saved["pdf"] = output_dir / flyer_name(response, place_id)
    saved["pdf"].write_bytes(response.content)

    response = requests.get(urls["qr"], timeout=10)
    print(f"QR: {response.status_code}")
    response.raise_for_status()
    saved["qr"] = output_dir / f"{place_id}.png"
    saved["qr"].write_bytes(response.content)

    for kind, path in saved.items():
        print(f"Saved {kind} to {path.resolve()}")
    return saved


def main(argv=None) -> int:
    args = parse_args(argv)

    if args.dry_run:
        for kind, url in store_urls(args.host, args.place_id).items():
            print(f"{kind}: {url}")
        return 0

    args.output_dir.mkdir(parents=True, exist_ok=True)
    try:
        fetch(args.place_id, args.host, args.output_dir)
    except requests.RequestException as exc:
        print(f"Request failed: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

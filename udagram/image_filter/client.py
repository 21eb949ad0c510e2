"""Helper script for exercising the image filter service."""

import argparse
import asyncio
import sys
from pathlib import Path

import httpx

DEFAULT_FILTER_URL = "http://localhost:8082"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Ask the image filter service to filter a public image and save the result."
    )
    parser.add_argument(
        "image_url",
        help="URL of a publicly accessible image.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("filtered.jpg"),
        help="Where to write the filtered JPEG (default: %(default)s).",
    )
    parser.add_argument(
        "--url",
        default=DEFAULT_FILTER_URL,
        help="Base URL of the running service (default: %(default)s).",
    )
    return parser


async def download_filtered(
    service_url: str,
    image_url: str,
    output: Path,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Request /filteredimage and write the body to output."""
    async with httpx.AsyncClient(base_url=service_url, transport=transport) as client:
        try:
            response = await client.get(
                "/filteredimage",
                params={"image_url": image_url},
                timeout=60.0
            )
        except httpx.RequestError as e:
            print(f"Connection error: {e}", file=sys.stderr)
            return 1

    if response.status_code != 200:
        print(f"Request failed ({response.status_code}): {response.text}", file=sys.stderr)
        return 1

    output.write_bytes(response.content)
    print(f"Saved filtered image to {output}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    return asyncio.run(download_filtered(args.url.rstrip("/"), args.image_url, args.output))


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python3
"""
CLI tool for the users API.

Usage:
    udagram-auth register alice@example.com --password secret
    udagram-auth login alice@example.com --password secret
    udagram-auth verify <token>
"""

import argparse
import asyncio
import getpass
import os
import sys

import httpx

# Use PORT env var if set (for running inside container), otherwise default to 8080
DEFAULT_PORT = os.getenv("PORT", "8080")
DEFAULT_USERS_URL = f"http://localhost:{DEFAULT_PORT}"

AUTH_PREFIX = "/api/v0/users/auth"


def _client(users_url: str, transport: httpx.AsyncBaseTransport | None) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=users_url, transport=transport)


def _message(response: httpx.Response) -> str:
    try:
        return response.json().get("message", response.text)
    except ValueError:
        return response.text


async def register(users_url: str, email: str, password: str, transport=None):
    """Register a new user and print the issued token."""
    async with _client(users_url, transport) as client:
        try:
            response = await client.post(
                f"{AUTH_PREFIX}/",
                json={"email": email, "password": password},
                timeout=10.0
            )

            if response.status_code == 201:
                data = response.json()
                print("\nUser registered successfully!")
                print(f"  Email: {data['user']['email']}")
                print(f"\nToken: {data['token']}\n")
                return 0
            elif response.status_code == 422:
                print(f"User may already exist: {email}", file=sys.stderr)
                return 1
            else:
                print(f"Error: {response.status_code} - {_message(response)}", file=sys.stderr)
                return 1

        except httpx.RequestError as e:
            print(f"Connection error: {e}", file=sys.stderr)
            return 1


async def login(users_url: str, email: str, password: str, transport=None):
    """Log in and print the issued token."""
    async with _client(users_url, transport) as client:
        try:
            response = await client.post(
                f"{AUTH_PREFIX}/login",
                json={"email": email, "password": password},
                timeout=10.0
            )

            if response.status_code == 200:
                data = response.json()
                print(f"\nLogged in as {data['user']['email']}")
                print(f"\nToken: {data['token']}\n")
                return 0
            elif response.status_code == 401:
                print("Invalid email or password", file=sys.stderr)
                return 1
            else:
                print(f"Error: {response.status_code} - {_message(response)}", file=sys.stderr)
                return 1

        except httpx.RequestError as e:
            print(f"Connection error: {e}", file=sys.stderr)
            return 1


async def verify(users_url: str, token: str, transport=None):
    """Check a token against the verification route."""
    async with _client(users_url, transport) as client:
        try:
            response = await client.get(
                f"{AUTH_PREFIX}/verification",
                headers={"Authorization": f"Bearer {token}"},
                timeout=10.0
            )

            if response.status_code == 200:
                print("Token is valid")
                return 0
            else:
                print(f"Token rejected: {response.status_code} - {_message(response)}", file=sys.stderr)
                return 1

        except httpx.RequestError as e:
            print(f"Connection error: {e}", file=sys.stderr)
            return 1


def main(argv: list[str] | None = None):
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        description="Register, log in and verify tokens against the udagram users API",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "--users-url",
        default=DEFAULT_USERS_URL,
        help=f"Users service URL (default: {DEFAULT_USERS_URL})"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Register
    register_parser = subparsers.add_parser("register", help="Register a new user")
    register_parser.add_argument("email", help="Email address")
    register_parser.add_argument("--password", help="Password (prompted when omitted)")

    # Login
    login_parser = subparsers.add_parser("login", help="Log in and print a token")
    login_parser.add_argument("email", help="Email address")
    login_parser.add_argument("--password", help="Password (prompted when omitted)")

    # Verify
    verify_parser = subparsers.add_parser("verify", help="Check whether a token is accepted")
    verify_parser.add_argument("token", help="Bearer token")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    users_url = args.users_url.rstrip("/")

    # Execute command
    if args.command == "register":
        password = args.password or getpass.getpass()
        return asyncio.run(register(users_url, args.email, password))
    elif args.command == "login":
        password = args.password or getpass.getpass()
        return asyncio.run(login(users_url, args.email, password))
    elif args.command == "verify":
        return asyncio.run(verify(users_url, args.token))
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())

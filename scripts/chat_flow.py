"""
Manual end-to-end check against a running server.

Signs up (or logs in) two users, sends a message from one to the other and
walks through unseen counts and conversation reads.

Run: python scripts/chat_flow.py [base_url]
"""

import asyncio
import json
import sys
import uuid

import httpx

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"


def print_section(title):
    print("\n" + "=" * 80)
    print(f"  {title}")
    print("=" * 80)


def print_response(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


async def signup(client: httpx.AsyncClient, name: str) -> dict:
    response = await client.post("/api/auth/signup", json={
        "fullName": name,
        "email": f"{name.lower()}-{uuid.uuid4().hex[:8]}@example.com",
        "password": "secret123",
        "bio": f"Hi, I'm {name}",
    })
    result = response.json()
    print_response(result)
    if not result.get("success"):
        raise SystemExit(f"Signup failed: {result.get('message')}")
    return result


async def main():
    print(f"\nQuickChat flow check against {BASE_URL}\n")

    async with httpx.AsyncClient(base_url=BASE_URL, timeout=30.0) as client:
        print_section("STEP 1: Sign up Alice and Bob")
        alice = await signup(client, "Alice")
        bob = await signup(client, "Bob")
        alice_auth = {"Authorization": f"Bearer {alice['token']}"}
        bob_auth = {"Authorization": f"Bearer {bob['token']}"}

        print_section("STEP 2: Bob sends Alice a message")
        response = await client.post(
            f"/api/messages/send/{alice['userData']['_id']}",
            json={"text": "Hey Alice!"},
            headers=bob_auth,
        )
        print_response(response.json())

        print_section("STEP 3: Alice's sidebar (expect 1 unseen from Bob)")
        response = await client.get("/api/messages/users", headers=alice_auth)
        print_response(response.json())

        print_section("STEP 4: Alice opens the conversation (marks it seen)")
        response = await client.get(f"/api/messages/{bob['userData']['_id']}", headers=alice_auth)
        print_response(response.json())

        print_section("STEP 5: Alice's sidebar again (expect no unseen)")
        response = await client.get("/api/messages/users", headers=alice_auth)
        print_response(response.json())

        print_section("STEP 6: Alice updates her bio")
        response = await client.patch(
            "/api/auth/update-profile",
            data={"bio": "Updated from the flow check"},
            headers=alice_auth,
        )
        print_response(response.json())

    print("\nDone.")


if __name__ == "__main__":
    asyncio.run(main())

"""
Posts a fake Telegram update to a locally running webhook.

    python scripts/send_test_update.py "/start"
    python scripts/send_test_update.py "/addchannel @news"
"""

import asyncio
import os
import sys
import time

import httpx
from dotenv import load_dotenv

load_dotenv()

BASE_URL = os.getenv("TEST_WEBHOOK_BASE", "http://localhost:8000")
API_PREFIX = os.getenv("API_PREFIX", "/api/v1")
WEBHOOK_SECRET = os.getenv("WEBHOOK_SECRET")
USER_ID = int(os.getenv("TEST_USER_ID", "42"))


async def send_update(text: str):
    """Simulate what Telegram sends to our webhook"""
    
    url = f"{BASE_URL}{API_PREFIX}/telegram/webhook"
    update_id = int(time.time())
    
    payload = {
        "update_id": update_id,
        "message": {
            "message_id": update_id,
            "from": {"id": USER_ID, "is_bot": False, "first_name": "Test"},
            "chat": {"id": USER_ID, "type": "private"},
            "date": update_id,
            "text": text
        }
    }
    
    headers = {}
    if WEBHOOK_SECRET:
        headers["X-Telegram-Bot-Api-Secret-Token"] = WEBHOOK_SECRET
    
    print(f"🧪 Posting to {url}: {text!r}")
    
    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(url, json=payload, headers=headers, timeout=10.0)
            print(f"✅ Status: {response.status_code}")
            print(f"📥 Response: {response.text[:200]}")
    except httpx.HTTPError as e:
        print(f"❌ Error: {e}")


if __name__ == "__main__":
    asyncio.run(send_update(" ".join(sys.argv[1:]) or "/start"))

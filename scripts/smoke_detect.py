"""Smoke script for detection + conversion through the HTTP surface.

Posts a few sample strings to /detect and /detect/convert on an app built
with the 'static' rate source and prints the responses.
"""

import json
import os
import tempfile

from fastapi.testclient import TestClient

from currency_lens.core.config import Settings
from currency_lens.main import create_app

SAMPLES = [
    "Price: $1,234.50 today",
    "US$100 and HK$100",
    "100 USD or USD 100",
    "Lunch RM18.90, dinner CHF 42",
    "no prices here",
]


def run():
    with tempfile.TemporaryDirectory() as d:
        settings = Settings(db_path=os.path.join(d, "smoke.db"), rate_source="static")
        client = TestClient(create_app(settings_override=settings))
        out = {}
        for text in SAMPLES:
            out[text] = {
                "detect": client.post("/detect", json={"text": text}).json(),
                "convert": client.post("/detect/convert", json={"text": text}).json(),
            }
        print(json.dumps(out, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    run()

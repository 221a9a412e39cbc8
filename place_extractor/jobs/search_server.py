"""HTTP entrypoint that runs Google Places searches synchronously (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

from flask import Flask, jsonify, request

from place_extractor.core.config import get_settings
from place_extractor.etl.transform import to_result_row
from place_extractor.jobs.search import SearchInputError, run_search
from place_extractor.vendors.google_places import GooglePlacesError, PlacesRateLimitError

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)

GENERIC_ERROR_MESSAGE = "Unexpected error while searching for places."

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; does not call Google."""
    return (
        jsonify(
            {
                "status": "ok",
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.post("/api/search")
def search_places() -> Any:
    """
    Run a search and return enriched places.
    Required JSON fields: apiKey, query
    Optional: location (str), maxResults (number)
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    try:
        records = run_search(
            api_key=payload.get("apiKey"),
            query=payload.get("query"),
            location=payload.get("location"),
            max_results=payload.get("maxResults"),
        )
    except SearchInputError as exc:
        return jsonify({"error": str(exc)}), 400
    except PlacesRateLimitError as exc:
        logger.warning("Places quota exceeded: %s", exc)
        return jsonify({"error": str(exc)}), 429
    except GooglePlacesError as exc:
        logger.error("Places search failed: %s", exc)
        return jsonify({"error": str(exc)}), 502
    except Exception as exc:  # noqa: BLE001
        logger.exception("Search failed unexpectedly: %s", exc)
        return jsonify({"error": GENERIC_ERROR_MESSAGE}), 500

    return jsonify({"results": [to_result_row(record) for record in records]}), 200


def main() -> None:
    """Cloud Run injects PORT; WORKER_PORT or 8080 is used locally."""
    port = get_settings().worker_port
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()

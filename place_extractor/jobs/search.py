"""Search job: walk Text Search pages, enrich them with Place Details and merge the results."""

import argparse
import json
import logging
import math
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from enum import Enum
from typing import Any, List, Optional, Sequence

from place_extractor.core.config import MAX_TOTAL_RESULTS, get_settings
from place_extractor.etl.transform import merge_record, to_detail, to_result_row, to_summary
from place_extractor.models import PlaceDetail, PlaceRecord, SearchSummary
from place_extractor.vendors import google_places

logger = logging.getLogger(__name__)

# Google rejects a next_page_token that is used before it becomes valid.
PAGE_TOKEN_DELAY_SECONDS = 2.0
DETAIL_BATCH_SIZE = 5
FATAL_DETAIL_ERRORS = (google_places.PlacesRateLimitError, google_places.PlacesRequestDeniedError)


class SearchInputError(ValueError):
    """Raised when the caller omits the API key or the search keyword."""


class WalkState(Enum):
    FETCHING = "fetching"
    WAITING = "waiting"
    DONE = "done"
    FAILED = "failed"


def compose_query(query: str, location: Optional[str] = None) -> str:
    if isinstance(location, str) and location.strip():
        return f"{query} in {location}"
    return query


def sanitize_max_results(raw: Any) -> int:
    """Clamp a caller supplied cap to [1, MAX_TOTAL_RESULTS], defaulting to the ceiling."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return MAX_TOTAL_RESULTS
    if math.isnan(raw):
        return MAX_TOTAL_RESULTS
    if math.isinf(raw):
        return MAX_TOTAL_RESULTS if raw > 0 else 1
    return min(MAX_TOTAL_RESULTS, max(1, math.floor(raw)))


def _next_state(page_token: Optional[str], collected: int, max_results: int) -> WalkState:
    if page_token and collected < max_results and collected < MAX_TOTAL_RESULTS:
        return WalkState.WAITING
    return WalkState.DONE


def collect_summaries(query: str, api_key: str, max_results: int) -> List[SearchSummary]:
    """Walk the Text Search pages for ``query`` and return at most ``max_results`` summaries.

    Summaries keep discovery order (page order, then position within the page).
    """
    summaries: List[SearchSummary] = []
    page_token: Optional[str] = None
    pages = 0
    state = WalkState.FETCHING

    while state not in (WalkState.DONE, WalkState.FAILED):
        if state is WalkState.WAITING:
            logger.debug("Waiting %.1fs before requesting page %d", PAGE_TOKEN_DELAY_SECONDS, pages + 1)
            time.sleep(PAGE_TOKEN_DELAY_SECONDS)
            state = WalkState.FETCHING
            continue

        try:
            payload = google_places.text_search(query=query, api_key=api_key, pagetoken=page_token)
        except Exception:
            state = WalkState.FAILED
            logger.error("Text search aborted on page %d for query=%s", pages + 1, query)
            raise

        pages += 1
        results = payload.get("results") or []
        for result in results:
            summary = to_summary(result)
            if summary is not None:
                summaries.append(summary)
        logger.info("Fetched %d results on page %d", len(results), pages)

        page_token = payload.get("next_page_token")
        state = _next_state(page_token, len(summaries), max_results)

    logger.info("Completed text search: pages=%d, summaries=%d", pages, len(summaries))
    return summaries[: min(max_results, MAX_TOTAL_RESULTS)]


def _fetch_detail(summary: SearchSummary, api_key: str) -> Optional[PlaceDetail]:
    try:
        result = google_places.place_details(place_id=summary.place_id, api_key=api_key)
    except FATAL_DETAIL_ERRORS:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.warning("Failed to fetch details for %s: %s", summary.place_id, exc)
        return None

    if result is None:
        return None
    return to_detail(result)


def _raise_fatal(futures: Sequence[Future]) -> None:
    """Re-raise a fatal error from the batch, quota errors first."""
    errors = [future.exception() for future in futures if future.exception() is not None]
    for error in errors:
        if isinstance(error, google_places.PlacesRateLimitError):
            raise error
    if errors:
        raise errors[0]


def enrich_summaries(summaries: Sequence[SearchSummary], api_key: str) -> List[PlaceRecord]:
    """Fetch details batch by batch and merge each summary with its detail.

    Every fetch in a batch finishes before the next batch is submitted. Quota and
    access-denied errors abort the whole run; any other failure leaves that one
    place without detail.
    """
    details: List[Optional[PlaceDetail]] = []

    with ThreadPoolExecutor(max_workers=DETAIL_BATCH_SIZE) as executor:
        for start in range(0, len(summaries), DETAIL_BATCH_SIZE):
            batch = summaries[start : start + DETAIL_BATCH_SIZE]
            futures = [executor.submit(_fetch_detail, summary, api_key) for summary in batch]
            wait(futures)
            _raise_fatal(futures)
            details.extend(future.result() for future in futures)
            logger.debug("Enriched batch %d (%d places)", start // DETAIL_BATCH_SIZE + 1, len(batch))

    return [merge_record(summary, detail) for summary, detail in zip(summaries, details)]


def run_search(
    *,
    api_key: Any,
    query: Any,
    location: Optional[str] = None,
    max_results: Any = None,
) -> List[PlaceRecord]:
    """Full pipeline: validate input, collect summaries, enrich and merge them."""
    if not isinstance(api_key, str) or not api_key.strip():
        raise SearchInputError("API key is required.")
    if not isinstance(query, str) or not query.strip():
        raise SearchInputError("Search keyword is required.")

    search_query = compose_query(query, location)
    cap = sanitize_max_results(max_results)
    logger.info("Running Places text search for query=%s max_results=%d", search_query, cap)

    summaries = collect_summaries(search_query, api_key, cap)
    records = enrich_summaries(summaries, api_key)
    logger.info("Search finished with %d records", len(records))
    return records


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search Google Places and print enriched results as JSON")
    parser.add_argument("--query", dest="query", required=True, help="Keyword to search, e.g. 'coffee'")
    parser.add_argument("--location", dest="location", help="Optional location appended as '<query> in <location>'")
    parser.add_argument(
        "--max-results",
        dest="max_results",
        type=int,
        default=get_settings().default_max_results,
        help=f"Maximum number of places to return (1-{MAX_TOTAL_RESULTS})",
    )
    parser.add_argument("--api-key", dest="api_key", help="Google Places API key (defaults to GOOGLE_API_KEY)")
    return parser


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args()
    api_key = args.api_key or get_settings().google_api_key

    try:
        records = run_search(
            api_key=api_key,
            query=args.query,
            location=args.location,
            max_results=args.max_results,
        )
    except SearchInputError as exc:
        logger.error("Invalid search input: %s", exc)
        raise SystemExit(2) from exc
    except google_places.GooglePlacesError as exc:
        logger.error("Places search failed: %s", exc)
        raise SystemExit(1) from exc

    print(json.dumps({"results": [to_result_row(record) for record in records]}, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()

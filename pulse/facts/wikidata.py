"""
facts/wikidata.py — Single SPARQL lookup against the Wikidata query service.

  GET https://query.wikidata.org/sparql?query=...&format=json
  -> {"results": {"bindings": [{"headLabel": {"value": "José Raúl Mulino"}}]}}

One request, no retries, no caching: the caller answers with the model when
this returns anything but `ok`.
"""
import re

import httpx

from pulse.config import Settings, get_settings
from pulse.observability.logger import get_logger, Timer
from pulse.outcome import Outcome

logger = get_logger(__name__)

HEAD_OF_STATE_QUERY = """SELECT ?headLabel WHERE {{
  wd:{entity_id} wdt:P35 ?head .
  SERVICE wikibase:label {{ bd:serviceParam wikibase:language "{language},en". }}
}}
LIMIT 1"""

_ENTITY_ID = re.compile(r"^Q\d+$")
_LANGUAGE_TAG = re.compile(r"^[a-z]{2,3}$")


def lookup_head_of_state(
    entity_id: str,
    language: str,
    client: httpx.Client | None = None,
    settings: Settings | None = None,
) -> Outcome[str]:
    """
    Return the label of the current head of state (P35) of a Wikidata entity.

    Returns:
        Outcome.ok(label) on success
        Outcome.unavailable(...) if the query returned no usable label
        Outcome.error(...) on network, HTTP or response-format failure
    """
    if not _ENTITY_ID.match(entity_id) or not _LANGUAGE_TAG.match(language):
        return Outcome.error(f"invalid lookup arguments: {entity_id!r}, {language!r}")

    settings = settings or get_settings()
    params = {
        "query": HEAD_OF_STATE_QUERY.format(entity_id=entity_id, language=language),
        "format": "json",
    }
    headers = {
        "Accept": "application/sparql-results+json",
        "User-Agent": settings.wikidata_user_agent,
    }

    try:
        with Timer() as t:
            if client is None:
                with httpx.Client(timeout=settings.wikidata_timeout_seconds) as owned:
                    response = owned.get(settings.wikidata_sparql_url, params=params, headers=headers)
            else:
                response = client.get(settings.wikidata_sparql_url, params=params, headers=headers)
        response.raise_for_status()
        bindings = response.json()["results"]["bindings"]
        label = bindings[0]["headLabel"]["value"].strip() if bindings else ""
    except httpx.HTTPError as e:
        logger.warning("fact_lookup_failed", extra={"entity_id": entity_id, "error": str(e)})
        return Outcome.error(str(e))
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning("fact_lookup_bad_response", extra={"entity_id": entity_id, "error": str(e)})
        return Outcome.error(f"unexpected response: {e}")

    # The label service falls back to the bare QID when no label exists
    if not label or _ENTITY_ID.match(label):
        logger.info("fact_lookup_empty", extra={"entity_id": entity_id})
        return Outcome.unavailable("no head of state label")

    logger.info(
        "fact_lookup_ok",
        extra={"entity_id": entity_id, "language": language, "latency_ms": t.elapsed_ms},
    )
    return Outcome.ok(label)

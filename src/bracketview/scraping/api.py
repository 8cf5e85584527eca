"""
Core API functions for reading tournament data from start.gg.

This module contains the GraphQL queries the display needs and the HTTP
plumbing around them. Responses are returned as decoded JSON; turning them
into typed records is the job of ``bracketview.core.parser``.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any

import requests

from bracketview.core.constants import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_MAX_RETRIES,
    DEFAULT_SETS_PER_PAGE,
    DEFAULT_TIMEOUT,
    STARTGG_API_URL,
    STARTGG_TOKEN_ENV,
)

logger = logging.getLogger(__name__)


class FetchError(RuntimeError):
    """A query could not be completed (transport error, HTTP status, bad JSON)."""


PHASE_QUERY = """
query PhaseBracket($phaseId: ID!, $page: Int!, $perPage: Int!) {
  phase(id: $phaseId) {
    id
    name
    phaseGroups {
      nodes {
        id
        displayIdentifier
        sets(page: $page, perPage: $perPage) {
          nodes {
            id
            round
            fullRoundText
            displayScore
            winnerId
            slots {
              prereqType
              prereqId
              entrant {
                id
                name
              }
            }
          }
        }
      }
    }
  }
}
"""

STREAM_QUEUE_QUERY = """
query StreamQueueOnTournament($tourneySlug: String!) {
  tournament(slug: $tourneySlug) {
    id
    streamQueue {
      stream {
        streamSource
        streamName
      }
      sets {
        id
      }
    }
  }
}
"""

SET_DETAIL_QUERY = """
query GetSetFull($setId: ID!) {
  set(id: $setId) {
    id
    displayScore
    fullRoundText
    startAt
    completedAt
    round
    totalGames
    phaseGroup {
      id
      displayIdentifier
      phase {
        name
      }
    }
    slots {
      entrant {
        id
        name
      }
      standing {
        placement
        stats {
          score {
            label
            value
          }
        }
      }
    }
  }
}
"""

TOURNAMENT_QUERY = """
query TournamentInfo($slug: String!) {
  tournament(slug: $slug) {
    id
    name
    startAt
  }
}
"""


def get_api_token() -> str | None:
    """Read the start.gg bearer token from the environment."""
    token = os.getenv(STARTGG_TOKEN_ENV)
    return token.strip() if token else None


def build_headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }


def post_query(
    query: str,
    variables: dict[str, Any],
    session: requests.Session,
    token: str,
    api_url: str = STARTGG_API_URL,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = DEFAULT_MAX_RETRIES,
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
) -> dict:
    """POST a GraphQL query, retrying transport failures with backoff.

    GraphQL-level ``errors`` are not treated as failures here; the document
    is returned as-is and the parser decides what is usable.

    Raises:
        FetchError: If every attempt failed.
    """
    last_error: Exception | None = None

    for attempt in range(max_retries):
        try:
            response = session.post(
                api_url,
                headers=build_headers(token),
                json={"query": query, "variables": variables},
                timeout=timeout,
            )
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            last_error = e
            logger.debug(f"Query attempt {attempt + 1} failed: {e}")

        if attempt < max_retries - 1:
            wait_time = backoff_factor**attempt
            logger.warning(
                f"Attempt {attempt + 1} failed for {variables}, "
                f"retrying in {wait_time:.1f}s"
            )
            time.sleep(wait_time)

    raise FetchError(
        f"Query failed after {max_retries} attempts ({variables}): {last_error}"
    )


class StartGGClient:
    """Thin wrapper holding the session, token and retry policy."""

    def __init__(
        self,
        token: str | None = None,
        session: requests.Session | None = None,
        api_url: str = STARTGG_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
    ):
        self.token = token or get_api_token()
        self.session = session or requests.Session()
        self.api_url = api_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor

    def query(self, query: str, variables: dict[str, Any]) -> dict:
        if not self.token:
            raise FetchError(
                f"No API token configured; set {STARTGG_TOKEN_ENV}"
            )
        return post_query(
            query,
            variables,
            session=self.session,
            token=self.token,
            api_url=self.api_url,
            timeout=self.timeout,
            max_retries=self.max_retries,
            backoff_factor=self.backoff_factor,
        )

    def fetch_phase(
        self, phase_id: int, page: int = 1, per_page: int = DEFAULT_SETS_PER_PAGE
    ) -> dict:
        """Phase/bracket document: every phase group with its sets."""
        return self.query(
            PHASE_QUERY, {"phaseId": phase_id, "page": page, "perPage": per_page}
        )

    def fetch_stream_queue(self, tournament_slug: str) -> dict:
        """Stream-queue document: queued set ids per stream channel."""
        return self.query(STREAM_QUEUE_QUERY, {"tourneySlug": tournament_slug})

    def fetch_set(self, set_id: str) -> dict:
        """Match-detail document for one set."""
        return self.query(SET_DETAIL_QUERY, {"setId": set_id})

    def fetch_tournament(self, tournament_slug: str) -> dict:
        return self.query(TOURNAMENT_QUERY, {"slug": tournament_slug})

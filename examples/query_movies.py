#!/usr/bin/env python3
"""
Example: Query a data service

Lists documents of a collection with a structured query and shows how
error responses stay inspectable.

Usage:
    python query_movies.py --endpoint https://data-myproject.wedeploy.io --token <token>
"""

import argparse
import logging
import sys

import requests

from wedeploy_client import UnexpectedResponseError, url
from wedeploy_client.query import aggregation, filter as f


def main():
    parser = argparse.ArgumentParser(description="Query a WeDeploy data service")
    parser.add_argument(
        "--endpoint",
        default="http://localhost:8080",
        help="Data service endpoint"
    )
    parser.add_argument(
        "--collection",
        default="movies",
        help="Collection to query"
    )
    parser.add_argument("--token", help="Bearer token")
    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Per-request timeout in seconds"
    )
    parser.add_argument("--debug", action="store_true", help="Log requests")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)

    movies = url(args.endpoint, args.collection).timeout(args.timeout)
    if args.token:
        movies.auth(args.token)

    movies.filter(f.gte("year", 2000).and_(f.lt("year", 2010)))
    movies.aggregate(aggregation.avg("avgRating", "rating"))
    movies.sort("year", "desc").limit(10)

    try:
        movies.post()
    except UnexpectedResponseError as e:
        print(f"Server answered {e.status_code}: {e.response.text}", file=sys.stderr)
        return 1
    except requests.exceptions.RequestException as e:
        print(f"Request failed: {e}", file=sys.stderr)
        return 1

    for movie in movies.decode_json():
        print(f"{movie.get('year')}  {movie.get('title')}")

    return 0


if __name__ == "__main__":
    sys.exit(main())

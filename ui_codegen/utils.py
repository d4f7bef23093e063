"""Loading component schemas from files and URLs.

A schema document is a JSON object (one component tree) or a JSON array of
objects (page sections). Sources are local paths or http(s) URLs, for
example an editor state endpoint.
"""

import json
from pathlib import Path
from typing import Any, Iterable
from urllib.parse import urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30


class SchemaLoaderError(Exception):
    """Raised when a schema document cannot be loaded."""

    pass


def is_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def read_schema_file(file_path: str | Path) -> Any:
    """Parse a schema document from a local file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        SchemaLoaderError: If the file cannot be read or holds invalid JSON.
    """
    file_path = Path(file_path)
    logger.debug(f"Reading schema file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning(f"Schema file does not have .json extension: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in file {file_path}: {e}")
        raise SchemaLoaderError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}", exc_info=True)
        raise SchemaLoaderError(f"Error reading file {file_path}: {e}") from e


def fetch_schema(url: str, timeout: int = DEFAULT_TIMEOUT) -> Any:
    """Fetch a schema document over HTTP.

    Raises:
        SchemaLoaderError: If the URL is invalid, the request fails or the
            body is not JSON.
    """
    parsed_url = urlparse(url)
    if not (is_url(url) and parsed_url.netloc):
        raise SchemaLoaderError(f"Invalid schema URL: {url}")

    logger.debug(f"Fetching schema from {url} (timeout {timeout}s)")
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()

        content_type = response.headers.get("content-type", "").lower()
        if "json" not in content_type and not parsed_url.path.endswith(".json"):
            logger.warning(f"Schema URL {url} answered with content type {content_type!r}")

        return response.json()

    except requests.exceptions.Timeout:
        logger.error(f"Request timeout for URL: {url}")
        raise SchemaLoaderError(f"Request timeout for URL: {url}")
    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error for URL {url}: {e}")
        raise SchemaLoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "?"
        logger.error(f"HTTP error {status} for URL: {url}")
        raise SchemaLoaderError(f"HTTP error {status} for URL: {url}") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}", exc_info=True)
        raise SchemaLoaderError(f"Request error for URL {url}: {e}") from e
    except ValueError as e:
        logger.error(f"Response from {url} is not JSON: {e}")
        raise SchemaLoaderError(f"Response from {url} is not JSON: {e}") from e


def check_schema_document(data: Any, source: str) -> Any:
    """Check that a document is a schema object or a list of schema objects."""
    if isinstance(data, dict):
        return data
    if isinstance(data, list) and all(isinstance(entry, dict) for entry in data):
        return data
    raise SchemaLoaderError(
        f"{source} must hold a schema object or a list of schema objects, "
        f"got {type(data).__name__}"
    )


def load_schema_source(source: str, timeout: int = DEFAULT_TIMEOUT) -> tuple[str, Any]:
    """Load a schema document from a path or an http(s) URL.

    Returns:
        Tuple of (source, parsed schema document).
    """
    if is_url(source):
        data = fetch_schema(source, timeout)
    else:
        data = read_schema_file(source)
    logger.info(f"Loaded schema from {source}")
    return source, check_schema_document(data, source)


def load_page_sections(sources: Iterable[str], timeout: int = DEFAULT_TIMEOUT) -> list[Any]:
    """Load page sections from several sources; a list document adds all its entries."""
    sections: list[Any] = []
    for source in sources:
        _, data = load_schema_source(source, timeout)
        if isinstance(data, list):
            sections.extend(data)
        else:
            sections.append(data)

    if not sections:
        raise SchemaLoaderError("No page sections found")
    return sections

from __future__ import annotations

import json
import logging
import urllib.parse
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from filterboard.config.model import DashboardConfig
from filterboard.core.dataset import Dataset
from filterboard.core.exceptions import DataLoadError

logger = logging.getLogger(__name__)

USER_AGENT = "filterboard (chart config fetch)"


@dataclass
class LoadedData:
    """Everything the dashboard needs before it can be built."""
    dataset: Dataset
    chart_configs: List[Dict[str, Any]]


def load_dataset(path: Path) -> Dataset:
    """
    Read the CSV dataset (header row = column names).

    :raises DataLoadError: if the file is missing, unreadable or has no columns
    """
    path = Path(path)
    try:
        frame = pd.read_csv(path)
    except FileNotFoundError as e:
        raise DataLoadError(str(path), "dataset file not found") from e
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataLoadError(str(path), f"could not parse dataset: {e}") from e

    logger.info(
        "Dataset loaded",
        extra={"path": str(path), "n_rows": len(frame), "columns": [str(c) for c in frame.columns]},
    )
    return Dataset(frame, name=path.stem, source_path=path)


def chart_config_url(config: DashboardConfig, chart_id: str) -> str:
    """
    Resolve the URL for one chart configuration.

    http(s):// and file:// templates are used as-is. Anything else is treated as a
    path relative to the config root and turned into a file:// URL.
    """
    target = config.chart_url_template.format(chart_id=chart_id)
    scheme = urllib.parse.urlparse(target).scheme
    if scheme in ("http", "https", "file"):
        return target

    path = Path(target)
    if not path.is_absolute():
        path = (config.config_root / path).resolve()
    return path.as_uri()


def fetch_chart_config(url: str, timeout: float) -> Dict[str, Any]:
    """
    GET one chart configuration and decode it as a JSON object.

    :raises DataLoadError: on any network, decoding or shape error
    """
    request = urllib.request.Request(
        url,
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
    )
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            payload = json.loads(response.read().decode("utf-8"))
    except json.JSONDecodeError as e:
        raise DataLoadError(url, f"chart configuration is not valid JSON: {e}") from e
    except (OSError, ValueError) as e:
        # URLError/HTTPError are OSError subclasses
        raise DataLoadError(url, f"failed to fetch chart configuration: {e}") from e

    if not isinstance(payload, dict):
        raise DataLoadError(url, "chart configuration must be a JSON object")
    return payload


def load_all(config: DashboardConfig) -> LoadedData:
    """
    Fetch the dataset and every chart configuration in parallel.

    Acts as a wait-for-all barrier: results are only returned once every fetch
    has succeeded. The first failure (in submission order) is raised after the
    remaining fetches finish. No retries.

    :raises DataLoadError: if the dataset or any chart configuration fails
    """
    urls = [chart_config_url(config, slot.chart_id) for slot in config.charts]

    with ThreadPoolExecutor(max_workers=len(urls) + 1) as pool:
        dataset_future = pool.submit(load_dataset, config.data_path)
        chart_futures = [pool.submit(fetch_chart_config, url, config.fetch_timeout) for url in urls]

        dataset = dataset_future.result()
        chart_configs = [future.result() for future in chart_futures]

    logger.info(
        "Startup data loaded",
        extra={
            "n_rows": dataset.n_rows,
            "chart_ids": [slot.chart_id for slot in config.charts],
        },
    )
    return LoadedData(dataset=dataset, chart_configs=chart_configs)
